"""
Certification Expiry Alerts

Notifies client users when an elevator's next certification date is
120, 90, 30 or 7 days away.

Strategy:
    1. Take checklists with a legible, non-null next certification date
    2. Keep the latest next certification date per elevator
    3. If days-until-expiry hits a threshold, build one notification
       per client profile
    4. Skip users that already got the same elevator alert in the last 24h
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from models import Checklist, Notification, Profile

logger = logging.getLogger(__name__)

ALERT_THRESHOLDS = [120, 90, 30, 7]
DEDUP_WINDOW = timedelta(hours=24)
ALERT_LINK = "certifications"


@dataclass
class CertificationAlert:
    user_id: str
    type: str
    title: str
    message: str
    threshold: int
    elevator_id: str = ""
    link: str = ALERT_LINK


def days_until(next_date: date, today: date) -> int:
    """Whole days from today until next_date (negative once expired)."""
    return (next_date - today).days


def matching_threshold(days: int) -> Optional[int]:
    """The alert threshold hit exactly today, if any."""
    for threshold in ALERT_THRESHOLDS:
        if threshold - 1 < days <= threshold:
            return threshold
    return None


def alert_message(days: int, elevator: str) -> tuple:
    """(urgency, message) for an elevator `days` away from expiry."""
    if days <= 0:
        return "error", f"La certificación del ascensor {elevator} ha VENCIDO. Debe renovarse inmediatamente."
    if days <= 7:
        return "error", (
            f"URGENTE: La certificación del ascensor {elevator} vence en {days} día(s). "
            f"Coordine la renovación de inmediato."
        )
    if days <= 30:
        return "warning", (
            f"La certificación del ascensor {elevator} vence en {days} días. "
            f"Por favor coordine la renovación pronto."
        )
    return "warning", (
        f"La certificación del ascensor {elevator} vence en {days} días. "
        f"Es recomendable comenzar a coordinar la renovación."
    )


def latest_per_elevator(checklists: List[Checklist]) -> Dict[str, Checklist]:
    """Keep, per elevator, the checklist with the latest next certification date."""
    latest: Dict[str, Checklist] = {}
    for checklist in checklists:
        if not checklist.next_certification_date:
            continue
        existing = latest.get(checklist.elevator_id)
        if existing is None or checklist.next_certification_date > existing.next_certification_date:
            latest[checklist.elevator_id] = checklist
    return latest


def _describe_elevator(checklist: Checklist) -> str:
    e = checklist.elevator
    if e is None:
        return "(desconocido)"
    return f"{e.brand} {e.model} (S/N: {e.serial_number})"


def build_alerts(db: Session, today: Optional[date] = None) -> List[CertificationAlert]:
    """Compute the alerts due today (nothing is written)."""
    today = today or date.today()

    checklists = db.query(Checklist).filter(
        Checklist.next_certification_date.isnot(None),
        Checklist.certification_not_legible.is_(False),
    ).all()

    alerts = []
    for checklist in latest_per_elevator(checklists).values():
        days = days_until(checklist.next_certification_date, today)
        threshold = matching_threshold(days)
        if threshold is None:
            continue

        urgency, message = alert_message(days, _describe_elevator(checklist))
        title = f"Certificación: Faltan {days} días"

        profiles = db.query(Profile).filter(Profile.client_id == checklist.client_id).all()
        for profile in profiles:
            alerts.append(CertificationAlert(
                user_id=profile.id,
                type=urgency,
                title=title,
                message=message,
                threshold=threshold,
                elevator_id=checklist.elevator_id,
            ))

    return alerts


def _recently_alerted(db: Session, alert: CertificationAlert, now: datetime) -> bool:
    # The message names the elevator, so other elevators of the same client still get theirs
    return db.query(Notification).filter(
        Notification.user_id == alert.user_id,
        Notification.created_at >= now - DEDUP_WINDOW,
        Notification.title == alert.title,
        Notification.message == alert.message,
    ).first() is not None


def run_certification_alerts(db: Session, today: Optional[date] = None) -> int:
    """
    Create today's certification notifications.

    Returns:
        Number of notifications created
    """
    now = datetime.now(timezone.utc)
    created = 0
    seen = set()

    for alert in build_alerts(db, today):
        key = (alert.user_id, alert.elevator_id, alert.threshold)
        if key in seen or _recently_alerted(db, alert, now):
            logger.debug(f"Skipping duplicate certification alert for user {alert.user_id}")
            continue
        seen.add(key)
        db.add(Notification(
            user_id=alert.user_id,
            type=alert.type,
            title=alert.title,
            message=alert.message,
            link=alert.link,
            read=False,
            created_at=now,
        ))
        created += 1

    if created:
        db.commit()

    logger.info(f"Certification alerts: created {created}")
    return created
