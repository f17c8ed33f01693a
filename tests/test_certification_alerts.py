from datetime import date, timedelta

import pytest

from models import Checklist, Elevator, Notification, Profile
from services.certification_alerts import (
    alert_message,
    build_alerts,
    days_until,
    matching_threshold,
    run_certification_alerts,
)
from helpers import seed_client

TODAY = date(2024, 3, 1)


def _seed_elevator(db, client, next_dates, not_legible=False, serial="S-77"):
    elevator = Elevator(client_id=client.id, brand="Schindler", model="3300", serial_number=serial)
    db.add(elevator)
    db.flush()
    for month, next_date in enumerate(next_dates, start=1):
        db.add(Checklist(
            client_id=client.id, elevator_id=elevator.id, month=month, year=2024,
            next_certification_date=next_date, certification_not_legible=not_legible,
        ))
    db.commit()
    return elevator


def _seed_profiles(db, client, count=1):
    profiles = [Profile(full_name=f"Usuario {n}", role="client", client_id=client.id) for n in range(count)]
    db.add_all(profiles)
    db.commit()
    return profiles


@pytest.mark.parametrize("days,expected", [
    (120, 120), (90, 90), (30, 30), (7, 7),
    (121, None), (89, None), (8, None), (0, None), (-3, None),
])
def test_matching_threshold(days, expected):
    assert matching_threshold(days) == expected


def test_days_until():
    assert days_until(date(2024, 3, 31), TODAY) == 30
    assert days_until(date(2024, 2, 28), TODAY) == -2


def test_alert_message_urgency():
    assert alert_message(7, "Otis")[0] == "error"
    assert "URGENTE" in alert_message(7, "Otis")[1]
    assert alert_message(30, "Otis") == (
        "warning",
        "La certificación del ascensor Otis vence en 30 días. Por favor coordine la renovación pronto.",
    )
    assert "recomendable" in alert_message(90, "Otis")[1]
    assert "VENCIDO" in alert_message(0, "Otis")[1]


def test_one_alert_per_client_profile(db):
    client = seed_client(db)
    _seed_elevator(db, client, [TODAY + timedelta(days=30)])
    _seed_profiles(db, client, count=2)

    alerts = build_alerts(db, TODAY)

    assert len(alerts) == 2
    assert {a.title for a in alerts} == {"Certificación: Faltan 30 días"}
    assert all(a.link == "certifications" for a in alerts)


def test_latest_next_date_per_elevator_wins(db):
    client = seed_client(db)
    # Older checklist would match 7 days, but the newer date (120 days) supersedes it
    _seed_elevator(db, client, [TODAY + timedelta(days=7), TODAY + timedelta(days=120)])
    _seed_profiles(db, client)

    alerts = build_alerts(db, TODAY)

    assert [a.threshold for a in alerts] == [120]


def test_illegible_certifications_are_ignored(db):
    client = seed_client(db)
    _seed_elevator(db, client, [TODAY + timedelta(days=30)], not_legible=True)
    _seed_profiles(db, client)

    assert build_alerts(db, TODAY) == []


def test_run_creates_notifications_once_per_day(db):
    client = seed_client(db)
    _seed_elevator(db, client, [TODAY + timedelta(days=90)])
    profile = _seed_profiles(db, client)[0]

    assert run_certification_alerts(db, TODAY) == 1
    assert run_certification_alerts(db, TODAY) == 0

    notifications = db.query(Notification).filter(Notification.user_id == profile.id).all()
    assert len(notifications) == 1
    assert notifications[0].type == "warning"
    assert notifications[0].read is False


def test_each_elevator_of_a_client_gets_its_own_alert(db):
    client = seed_client(db)
    _seed_elevator(db, client, [TODAY + timedelta(days=30)], serial="S-1")
    _seed_elevator(db, client, [TODAY + timedelta(days=30)], serial="S-2")
    profile = _seed_profiles(db, client)[0]

    assert run_certification_alerts(db, TODAY) == 2
    assert run_certification_alerts(db, TODAY) == 0

    messages = sorted(n.message for n in db.query(Notification).filter(Notification.user_id == profile.id))
    assert len(messages) == 2
    assert "S/N: S-1" in messages[0]
    assert "S/N: S-2" in messages[1]
