from __future__ import annotations

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Body, Depends, Query
from pydantic import StrictInt

from dautracker.features.activity.service import ActivityTracker, get_tracker
from dautracker.models.activity import DAUStatistics, MemoryUsage

router = APIRouter(prefix="/api/dau", tags=["dau"])


@router.post("/record", response_model=DAUStatistics, response_model_exclude_none=True)
def record_user_active(
    user_id: int = Query(..., alias="userId"),
    day: Optional[date] = Query(None, alias="date"),
    tracker: ActivityTracker = Depends(get_tracker),
):
    """POST /api/dau/record?userId=123"""
    success = tracker.record_active(user_id, day)
    return DAUStatistics(
        date=(day or tracker.today()).isoformat(),
        message="User activity recorded" if success else "Failed to record user activity",
    )


@router.post("/batch-record", response_model=DAUStatistics, response_model_exclude_none=True)
def batch_record_user_active(
    user_ids: List[Optional[StrictInt]] = Body(...),
    day: Optional[date] = Query(None, alias="date"),
    tracker: ActivityTracker = Depends(get_tracker),
):
    """POST /api/dau/batch-record with body [1, 2, 3, 100, 500]"""
    count = tracker.batch_record_active(user_ids, day)
    return DAUStatistics(
        date=(day or tracker.today()).isoformat(),
        message=f"Batch record: {count}/{len(user_ids)}",
    )


@router.get("/check", response_model=DAUStatistics, response_model_exclude_none=True)
def check_user_active(
    user_id: int = Query(..., alias="userId"),
    day: Optional[date] = Query(None, alias="date"),
    tracker: ActivityTracker = Depends(get_tracker),
):
    active = tracker.is_active(user_id, day)
    return DAUStatistics(
        date=(day or tracker.today()).isoformat(),
        is_active=active,
        message="User is active" if active else "User is not active",
    )


@router.get("/count", response_model=DAUStatistics, response_model_exclude_none=True)
def get_dau_count(
    day: Optional[date] = Query(None, alias="date"),
    tracker: ActivityTracker = Depends(get_tracker),
):
    day = day or tracker.today()
    return DAUStatistics(
        date=day.isoformat(),
        dau_count=tracker.dau_count(day),
        message="DAU query succeeded",
    )


@router.get("/range", response_model=DAUStatistics, response_model_exclude_none=True)
def get_dau_count_range(
    start_date: date = Query(..., alias="startDate"),
    end_date: date = Query(..., alias="endDate"),
    tracker: ActivityTracker = Depends(get_tracker),
):
    return DAUStatistics(
        date_range_stats=tracker.dau_count_range(start_date, end_date),
        message="DAU range query succeeded",
    )


@router.get("/memory", response_model=MemoryUsage)
def get_memory_usage(
    day: Optional[date] = Query(None, alias="date"),
    tracker: ActivityTracker = Depends(get_tracker),
):
    day = day or tracker.today()
    memory_bytes = tracker.key_memory_usage(day)
    return MemoryUsage(
        date=day.isoformat(),
        memory_bytes=memory_bytes,
        memory_kb=f"{memory_bytes / 1024:.2f} KB",
        message="Memory query succeeded",
    )
