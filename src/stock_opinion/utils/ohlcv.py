"""Historical bar standardization utilities."""

import pandas as pd

BAR_COLUMNS = ["date", "close", "volume"]


def standardize_bars(df: pd.DataFrame) -> pd.DataFrame:
    """
    Standardize a yfinance download into chronological close/volume bars.

    Output columns (always, in this order): date, close, volume.
    Daily bars get YYYY-MM-DD dates, intraday bars full ISO timestamps.
    Rows without a close are dropped.

    Args:
        df: Raw DataFrame from yf.download

    Returns:
        Standardized DataFrame sorted by date ascending
    """
    if df is None or df.empty:
        return pd.DataFrame(columns=BAR_COLUMNS)

    df = df.copy()

    # yf.download returns (field, ticker) MultiIndex columns even for one ticker
    if isinstance(df.columns, pd.MultiIndex):
        df.columns = df.columns.get_level_values(0)

    df.columns = [str(c).lower() for c in df.columns]
    df = df.sort_index().reset_index()

    date_cols = [c for c in df.columns if str(c).lower() in ("date", "datetime", "index")]
    if date_cols:
        df = df.rename(columns={date_cols[0]: "date"})

    if "date" in df.columns and pd.api.types.is_datetime64_any_dtype(df["date"]):
        has_time = (df["date"].dt.normalize() != df["date"]).any()
        if has_time:
            if df["date"].dt.tz is not None:
                df["date"] = df["date"].dt.strftime("%Y-%m-%dT%H:%M:%S%z")
            else:
                df["date"] = df["date"].dt.strftime("%Y-%m-%dT%H:%M:%S")
        else:
            df["date"] = df["date"].dt.strftime("%Y-%m-%d")

    for col in BAR_COLUMNS:
        if col not in df.columns:
            df[col] = pd.NA

    df = df[BAR_COLUMNS]
    df = df.dropna(subset=["close"])
    return df.reset_index(drop=True)


def bars_to_rows(df: pd.DataFrame) -> list[dict]:
    """Convert standardized bars to a list of {date, close, volume} dicts."""
    rows = []
    for record in df.to_dict("records"):
        volume = record.get("volume")
        rows.append(
            {
                "date": record["date"],
                "close": float(record["close"]),
                "volume": int(volume) if volume is not None and not pd.isna(volume) else None,
            }
        )
    return rows
