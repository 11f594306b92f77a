import pandas as pd
import re

# Canonical columns the app persists (camelCase, as stored in the kv documents)
REQUIRED_COLS = [
    "projectCode",
    "projectName",
    "clientName",
    "description",
    "currentPhase",
    "completionPercentage",
    "hoursAllocated",
    "hoursConsumed",
    "startDate",
    "targetCompletionDate",
    "priority",
    "ragStatus",
]

NUMERIC_COLS = ["completionPercentage", "hoursAllocated", "hoursConsumed"]
TEXT_COLS = [c for c in REQUIRED_COLS if c not in NUMERIC_COLS]

# Header aliases (case/space/underscore-insensitive)
HEADER_ALIASES = {
    # code
    "projectcode": "projectCode",
    "project code": "projectCode",
    "code": "projectCode",
    "project id": "projectCode",
    "id": "projectCode",

    # name / client
    "projectname": "projectName",
    "project name": "projectName",
    "name": "projectName",
    "clientname": "clientName",
    "client name": "clientName",
    "client": "clientName",
    "department": "clientName",
    "description": "description",

    # phase
    "currentphase": "currentPhase",
    "current phase": "currentPhase",
    "phase": "currentPhase",

    # completion
    "completionpercentage": "completionPercentage",
    "completion percentage": "completionPercentage",
    "completion": "completionPercentage",
    "% complete": "completionPercentage",
    "percent complete": "completionPercentage",

    # hours
    "hoursallocated": "hoursAllocated",
    "hours allocated": "hoursAllocated",
    "allocated hours": "hoursAllocated",
    "budget hours": "hoursAllocated",
    "hoursconsumed": "hoursConsumed",
    "hours consumed": "hoursConsumed",
    "consumed hours": "hoursConsumed",
    "actual hours": "hoursConsumed",

    # dates
    "startdate": "startDate",
    "start date": "startDate",
    "start": "startDate",
    "targetcompletiondate": "targetCompletionDate",
    "target completion date": "targetCompletionDate",
    "target date": "targetCompletionDate",
    "end date": "targetCompletionDate",

    # status
    "priority": "priority",
    "ragstatus": "ragStatus",
    "rag status": "ragStatus",
    "rag": "ragStatus",
    "status": "ragStatus",
}

# Value normalization for RAG status
RAG_MAP = {
    "green": "Green",
    "g": "Green",
    "on track": "Green",
    "amber": "Amber",
    "a": "Amber",
    "at risk": "Amber",
    "red": "Red",
    "r": "Red",
    "overdue": "Red",
}

def _normalize_col(c: str) -> str:
    c = (c or "").strip()
    c = re.sub(r"\s+", " ", c)
    key = c.lower().strip()
    key = key.replace("_", " ")
    key = re.sub(r"\s+", " ", key)
    return HEADER_ALIASES.get(key, c)

def _coerce_float(series: pd.Series) -> pd.Series:
    cleaned = series.astype(str).str.replace("%", "", regex=False).str.replace(",", "", regex=False).str.strip()
    return pd.to_numeric(cleaned, errors="coerce").fillna(0.0).astype(float)

def _collapse_duplicate_columns(df: pd.DataFrame, colname: str) -> pd.DataFrame:
    """
    If multiple columns share the same name (e.g. 'Code' and 'Project ID' both
    aliasing to projectCode), collapse them into a single Series by taking the
    first non-null across duplicates.
    """
    same = [c for c in df.columns if c == colname]
    if not same:
        return df
    if len(same) == 1:
        return df

    combined = df[colname].bfill(axis=1).iloc[:, 0]
    df = df.loc[:, df.columns != colname].copy()
    df[colname] = combined
    return df

def preprocess_df(df: pd.DataFrame) -> pd.DataFrame:
    # 1) Normalize column names
    df = df.copy()
    df.columns = [_normalize_col(str(c)) for c in df.columns]

    if "projectCode" not in df.columns:
        raise ValueError("Missing project code column (e.g. 'Project Code').")

    # 2) Collapse duplicates for the canonical columns
    for key in REQUIRED_COLS:
        df = _collapse_duplicate_columns(df, key)

    # 3) Ensure required columns exist (create empty if missing)
    for rc in REQUIRED_COLS:
        if rc not in df.columns:
            df[rc] = ""

    # 4) Coerce numeric fields
    for col in NUMERIC_COLS:
        df[col] = _coerce_float(df[col])

    # 5) Trim text fields
    for col in TEXT_COLS:
        df[col] = df[col].fillna("").astype(str).str.strip()

    # 6) Normalize RAG values, keep unknown ones as given
    rag = df["ragStatus"]
    df["ragStatus"] = rag.str.lower().map(RAG_MAP).fillna(rag)

    # 7) Rows without a code cannot be keyed
    df = df[df["projectCode"] != ""]

    return df[REQUIRED_COLS].reset_index(drop=True)

def records_from_df(df: pd.DataFrame) -> list:
    records = df.to_dict(orient="records")
    for r in records:
        for col in NUMERIC_COLS:
            r[col] = float(r[col])
        for col in ("startDate", "targetCompletionDate"):
            if not r[col]:
                r[col] = None
    return records

def canonical_columns(df: pd.DataFrame) -> list:
    """Canonical columns actually present in a raw upload, before any are filled in."""
    present = {_normalize_col(str(c)) for c in df.columns}
    return [c for c in REQUIRED_COLS if c in present]
