"""Stand-in for the transfer data service, serving snapshot documents from disk"""

import json
import os
from pathlib import Path
from fastapi import FastAPI, HTTPException

SERVICE_NAME = "mock-transfer-data"

# /snapshots is mounted in Docker; fall back to the bundled mock/snapshots
SNAPSHOT_DIR = Path(os.environ.get("SNAPSHOT_DIR", "/snapshots"))
if not SNAPSHOT_DIR.is_dir():
    SNAPSHOT_DIR = Path(__file__).resolve().parents[1] / "snapshots"

app = FastAPI(title="Mock Transfer Data Service", version="1.0.0")


@app.get("/health")
def health():
    return {"status": "ok", "service": SERVICE_NAME, "snapshots": len(list(SNAPSHOT_DIR.glob("snapshot_*.json")))}


@app.get("/transfer-data")
def get_transfer_data(user_id: str = "default"):
    """Accounts and transfer rules for one user, as the router's live endpoint expects them"""
    snapshot_file = SNAPSHOT_DIR / f"snapshot_{user_id}.json"
    if not snapshot_file.is_file():
        raise HTTPException(status_code=404, detail=f"No snapshot for user {user_id}")
    return json.loads(snapshot_file.read_text(encoding="utf-8"))
