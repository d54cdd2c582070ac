import numpy as np
import pytest

from portfolio_frontier.data.loaders import (
    load_returns_file,
    load_upload_returns,
    parse_ohlcv_close_returns,
)
from portfolio_frontier.errors import CsvValidationError


def test_parse_returns_sorted_by_date_with_blank_lines_and_crlf():
    text = (
        "date,Close\r\n"
        "2024-03-01,121\r\n"
        "\r\n"
        "2024-01-01,100\r\n"
        "2024-02-01,110\r\n"
    )
    returns = parse_ohlcv_close_returns(text)
    assert np.allclose(returns, [0.1, 0.1])


def test_header_is_case_insensitive(make_csv):
    returns = parse_ohlcv_close_returns(make_csv([10, 11, 12], header="DATE,OPEN,HIGH,LOW,CLOSE,VOLUME"))
    assert returns.size == 2


def test_missing_close_column_is_rejected(make_csv):
    with pytest.raises(CsvValidationError, match="Close"):
        parse_ohlcv_close_returns(make_csv([10, 11, 12], header="Date,Open,High,Low,Volume"))


def test_single_valid_row_is_rejected():
    with pytest.raises(CsvValidationError, match="Too few valid Date/Close records"):
        parse_ohlcv_close_returns("Date,Close\n2024-01-01,100\n,101\n2024-03-01,abc\n")


def test_invalid_rows_are_skipped():
    text = "Date,Close\n2024-01-01,100\n,105\n2024-02-01,nan\n2024-03-01,110\n2024-04-01,121\n"
    returns = parse_ohlcv_close_returns(text)
    assert np.allclose(returns, [0.1, 0.1])


def test_non_positive_previous_close_is_skipped(make_csv):
    returns = parse_ohlcv_close_returns(make_csv([0, 10, 11, 12]))
    assert np.allclose(returns, [0.1, 12 / 11 - 1])

    with pytest.raises(CsvValidationError, match="Too few return points"):
        parse_ohlcv_close_returns(make_csv([0, 10, 11]))


def test_empty_csv_is_rejected():
    with pytest.raises(CsvValidationError):
        parse_ohlcv_close_returns("\n\n")


def test_upload_requires_minimum_returns(make_csv):
    with pytest.raises(CsvValidationError, match="Found: 5"):
        load_upload_returns(make_csv([100 + i for i in range(6)]), min_returns=12)

    returns = load_upload_returns(make_csv([100 + i for i in range(13)]), min_returns=12)
    assert returns.size == 12


def test_load_returns_file(tmp_path, make_csv):
    path = tmp_path / "asset.csv"
    path.write_text(make_csv([100 * 1.01**i for i in range(20)]), encoding="utf-8")
    returns = load_returns_file(path)
    assert returns.size == 19
    assert np.allclose(returns, 0.01)


def test_rows_are_ordered_by_raw_date_text():
    text = "Date,Close\n1/2/2024,100\n1/10/2024,200\n1/3/2024,100\n"
    # "1/10/2024" sorts before "1/2/2024" as text.
    returns = parse_ohlcv_close_returns(text)
    assert np.allclose(returns, [-0.5, 0.0])
