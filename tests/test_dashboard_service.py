from datetime import date

from src.gym_console.gym_console.attendance.service import AttendanceService
from src.gym_console.gym_console.dashboard.service import DashboardService

TODAY = date(2024, 10, 13)


def make_dashboard(attendance_repo, users_repo):
    service = AttendanceService(attendance_repo, users_repo)
    return DashboardService(attendance_repo, users_repo, service)


def test_trend_covers_seven_days_oldest_first(attendance_repo, users_repo):
    attendance_repo.add(user_id="u1", date="2024-10-13", status="present")
    attendance_repo.add(user_id="u2", date="2024-10-13", status="present")
    attendance_repo.add(user_id="u1", date="2024-10-07", status="present")
    attendance_repo.add(user_id="u2", date="2024-10-06", status="present")

    trend = make_dashboard(attendance_repo, users_repo).present_trend(TODAY)

    assert [t["date"] for t in trend] == ["Oct 7", "Oct 8", "Oct 9", "Oct 10", "Oct 11", "Oct 12", "Oct 13"]
    assert trend[0]["count"] == 1
    assert trend[-1]["count"] == 2


def test_build_collects_totals_and_recent_rows(attendance_repo, users_repo):
    for user in ("u1", "u2", "u3", "u1", "u2", "u3"):
        attendance_repo.add(user_id=user, date="2024-10-13", status="present")

    data = make_dashboard(attendance_repo, users_repo).build(TODAY)

    assert data.total_users == 3
    assert data.today_attendance == 6
    assert len(data.recent) == 5
    assert data.as_dict()["recent"][0]["user_name"] == "Carla Diaz"


def test_build_survives_remote_failures(attendance_repo, users_repo):
    attendance_repo.fail_reads = True
    users_repo.fail = True

    data = make_dashboard(attendance_repo, users_repo).build(TODAY)

    assert data.total_users == 0
    assert data.today_attendance == 0
    assert data.recent == []
    assert len(data.trend) == 7


def test_today_present_agrees_with_day_view_for_capitalized_status(attendance_repo, users_repo):
    attendance_repo.add(user_id="u1", date="2024-10-13", status="Present")
    attendance_repo.add(user_id="u2", date="2024-10-13", status="present")
    dashboard = make_dashboard(attendance_repo, users_repo)

    data = dashboard.build(TODAY)
    view = AttendanceService(attendance_repo, users_repo).day_view("2024-10-13")

    assert data.today_attendance == view.stats.present == 2
