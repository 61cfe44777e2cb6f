from fastapi import FastAPI, HTTPException, Request
from typing import Any, Dict

app = FastAPI(title="Mock Results Sink", version="1.0.0")
# Latest payload per group; whichever publish arrives last wins
RESULTS: Dict[str, Dict[str, Any]] = {}

@app.get("/health")
def health(): return {"status": "ok"}

@app.post("/results")
async def store_result(request: Request):
    payload = await request.json()
    group_id = payload.get("groupId")
    if not group_id:
        raise HTTPException(status_code=422, detail="groupId is required")
    RESULTS[group_id] = payload
    return {"stored": True, "taskId": payload.get("taskId")}

@app.get("/results/{group_id}")
def get_result(group_id: str):
    if group_id not in RESULTS:
        raise HTTPException(status_code=404, detail="no results for group")
    return RESULTS[group_id]
