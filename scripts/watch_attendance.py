"""Live member attendance view in the terminal.

Loads one member's attendance, subscribes to realtime changes and reprints
the table and stats after every change. Stop with Ctrl+C.
"""

from __future__ import annotations

import argparse
import asyncio

from src.gym_console.gym_console.attendance.model import SubjectScope
from src.gym_console.gym_console.attendance.service import AttendanceView
from src.gym_console.gym_console.container import build_container
from src.gym_console.gym_console.main import configure_logging, load_settings


def print_view(view: AttendanceView, notice=None) -> None:
    if notice:
        print(f"* {notice}")
    s = view.stats
    print(f"total={s.total} present={s.present} absent={s.absent} rate={s.rate}%")
    for row in view.rows:
        if row.placeholder:
            print(f"  {row.message}")
            continue
        print(f"  {row.date}  {row.check_in:>5}  {row.check_out:>5}  {row.duration:>7}  {row.status}")


async def watch(user_id: str, start: str | None, end: str | None, limit: int | None) -> None:
    settings = load_settings()
    configure_logging(settings)
    container = build_container(supabase_config=settings.SUPABASE_CONFIG)

    async with container.new_session(on_change=print_view, limit=limit) as session:
        await session.open(SubjectScope.for_user(user_id, start_date=start, end_date=end))
        await asyncio.Event().wait()


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Watch a member's attendance in real time.")
    parser.add_argument("user_id", help="gym_users.id of the member")
    parser.add_argument("--start", help="first date (YYYY-MM-DD)")
    parser.add_argument("--end", help="last date (YYYY-MM-DD)")
    parser.add_argument("--limit", type=int, default=None, help="rows to show")
    return parser


def main() -> None:
    args = _build_parser().parse_args()
    try:
        asyncio.run(watch(args.user_id, args.start, args.end, args.limit))
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
