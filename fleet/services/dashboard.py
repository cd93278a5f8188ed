from datetime import datetime
from typing import List

import pandas as pd
from pandas import DataFrame

from fleet.models.booking import (
    ACTIVE_STATUSES,
    BookingStatus,
    DashboardStats,
    Reservation,
)
from fleet.models.vehicle import Vehicle
from fleet.services.intervals import is_busy_at


def aggregate(
    vehicles: List[Vehicle],
    reservations: List[Reservation],
    now: datetime,
    recent_limit: int = 5,
) -> DashboardStats:
    """
    Fleet-wide counters at instant now

    availableVehicles is the roster size minus the vehicles that are busy at
    now, so the two always add up to totalVehicles.
    """
    total = len(vehicles)
    if not reservations:
        return DashboardStats(
            total_vehicles=total,
            available_vehicles=total,
            active_bookings=0,
            completed_bookings=0,
            recent_bookings=[],
            as_of=now,
        )

    df = prepare_df(reservations, now)

    active = int(df["status"].isin([s.value for s in ACTIVE_STATUSES]).sum())
    completed = int((df["status"] == BookingStatus.COMPLETED.value).sum())

    roster = {v.id for v in vehicles}
    busy = set(df.loc[df["busy"], "vehicle_id"]) & roster

    return DashboardStats(
        total_vehicles=total,
        available_vehicles=total - len(busy),
        active_bookings=active,
        completed_bookings=completed,
        recent_bookings=recent(df, recent_limit),
        as_of=now,
    )


def prepare_df(reservations: List[Reservation], now: datetime) -> DataFrame:
    """
    Prepare Dataframe of reservations

    Flags each row busy when its reservation keeps the vehicle busy at now.
    """
    df = pd.DataFrame([r.model_dump() for r in reservations])
    df["raw"] = reservations
    df["status"] = [r.status.value for r in reservations]
    df["created_at"] = pd.to_datetime(df["created_at"], utc=True)
    df["busy"] = df["raw"].apply(lambda r: is_busy_at(r, now)).astype(bool)
    return df


def recent(df: DataFrame, limit: int) -> List[Reservation]:
    """The limit most recently created reservations, newest first"""
    if limit <= 0:
        return []
    df_sorted = df.sort_values(["created_at", "sequence"], ascending=False)
    return df_sorted.head(limit)["raw"].tolist()
