import pytest

from adlens.connectors.sheets.parser import _clean_date, _safe_float, parse_csv
from adlens.core.errors import ParseError
from adlens.core.metric_registry import normalize_header, resolve_field


def test_parses_english_headers():
    text = (
        "Date,Campaign Name,Ad ID,Ad Name,Spend,Conversions,Reach,Impressions,Clicks\n"
        "2024-01-29,Summer,123,Hero video,100.50,2,800,1000,50\n"
    )

    [record] = parse_csv(text)

    assert record.date == "2024-01-29"
    assert record.campaign_name == "Summer"
    assert record.creative_id == "123"
    assert record.creative_name == "Hero video"
    assert record.spend == 100.5
    assert record.conversions == 2
    assert record.reach == 800
    assert record.impressions == 1000
    assert record.engagement == 50


def test_parses_portuguese_export():
    text = (
        "Data,Campanha,Anúncio,Investimento,Conversões,Alcance,Impressões,Engajamento\n"
        '29/01/2024,Verão,Criativo A,"R$ 1.234,56",3,900,"1.500.000",50\n'
    )

    [record] = parse_csv(text)

    assert record.date == "2024-01-29"
    assert record.campaign_name == "Verão"
    assert record.creative_name == "Criativo A"
    assert record.creative_key == "Criativo A"
    assert record.spend == pytest.approx(1234.56)
    assert record.conversions == 3
    assert record.impressions == 1_500_000


def test_missing_measures_default_to_zero_and_blank_rows_are_skipped():
    text = "date,creative_id,spend\n2024-01-29,c1,\n,,\n2024-01-30,c2,7\n"

    records = parse_csv(text)

    assert [r.creative_id for r in records] == ["c1", "c2"]
    assert records[0].spend == 0.0
    assert records[0].impressions == 0.0
    assert records[1].spend == 7.0


def test_first_matching_column_wins():
    text = "date,engagement,clicks\n2024-01-29,40,7\n"
    assert parse_csv(text)[0].engagement == 40


def test_unrecognised_dates_pass_through_for_the_normalizer():
    [record] = parse_csv("date,spend\nlast tuesday,1\n")
    assert record.date == "last tuesday"


def test_header_only_payload_has_no_records():
    assert parse_csv("date,spend\n") == []


@pytest.mark.parametrize("text", ["", "   \n  "])
def test_empty_payload_is_a_parse_error(text):
    with pytest.raises(ParseError):
        parse_csv(text)


def test_payload_without_date_column_is_a_parse_error():
    with pytest.raises(ParseError, match="no date column"):
        parse_csv("<html><body>Sign in</body></html>\n")


def test_ragged_rows_are_a_parse_error():
    with pytest.raises(ParseError, match="Malformed"):
        parse_csv("date,spend\n2024-01-01,1\n2024-01-02,1,2,3\n")


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("1234", 1234.0),
        ("1,234.56", 1234.56),
        ("1.234,56", 1234.56),
        ("R$ 12,50", 12.5),
        ("$1,000", 1000.0),
        ("3.5", 3.5),
        ("4,25%", 4.25),
        ("", 0.0),
        ("n/a", 0.0),
        (None, 0.0),
    ],
)
def test_safe_float(raw, expected):
    assert _safe_float(raw) == pytest.approx(expected)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("05/02/2024", "2024-02-05"),
        ("5/2/2024", "2024-02-05"),
        ("2024-02-05 00:00:00", "2024-02-05"),
        (" 2024-02-05 ", "2024-02-05"),
        ("garbage", "garbage"),
    ],
)
def test_clean_date(raw, expected):
    assert _clean_date(raw) == expected


def test_header_folding():
    assert normalize_header("  Impressões ") == "impressoes"
    assert normalize_header("Amount Spent (BRL)") == "amount_spent_brl"
    assert resolve_field("Valor usado") == "spend"
    assert resolve_field("Amount Spent (BRL)") == "spend"
    assert resolve_field("Custo (R$)") is None
    assert resolve_field("Investimento (R$)") == "spend"
    assert resolve_field("Nome do anúncio") == "creative_name"


def test_currency_suffixed_headers_resolve():
    text = "Day,Ad Name,Amount Spent (BRL),Results\n2024-01-29,Hero,\"1.234,56\",4\n"

    [record] = parse_csv(text)

    assert record.spend == pytest.approx(1234.56)
    assert record.conversions == 4
