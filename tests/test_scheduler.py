import asyncio
from concurrent.futures import ThreadPoolExecutor
from datetime import date, datetime

import pytest

from wordleturtle.days import puzzle_for_date, puzzle_for_now
from wordleturtle.scheduler import DayPhase, DeadlineScheduler, ScheduledDays

from conftest import BOT_NAME, LA, FakeClock, make_result


def _scheduler(store, slack, clock, **kwargs):
    return DeadlineScheduler(
        store, slack, ScheduledDays(), tz=LA, bot_name=BOT_NAME, clock=clock, sleep=clock.sleep, **kwargs
    )


def test_scheduled_days_check_and_insert_is_exclusive():
    days = ScheduledDays()
    with ThreadPoolExecutor(max_workers=16) as pool:
        outcomes = list(pool.map(lambda _: days.add_if_absent(917), range(200)))
    assert outcomes.count(True) == 1
    assert 917 in days
    assert len(days) == 1


@pytest.mark.asyncio
async def test_sequence_posts_warning_then_final(store, slack, clock):
    store.append(make_result("userid1", "sean", 917, 3))
    scheduler = _scheduler(store, slack, clock)

    assert scheduler.schedule("testchannel", 917)
    assert scheduler.phase(917) == DayPhase.SCHEDULED
    await scheduler.wait(917)

    # 09:00 -> 16:00 warning -> 17:00 deadline
    assert clock.sleeps == [7 * 3600, 3600]
    warning, final = slack.texts()
    assert warning.startswith(":hourglass: One hour left to play Wordle #917!")
    assert "Still waiting on: lara" in warning
    assert final.startswith(":confetti_ball: Congratulations to sean!")
    assert ":turkey: lara forgot to play!" in final
    assert scheduler.phase(917) == DayPhase.COMPLETED


@pytest.mark.asyncio
async def test_final_tally_reads_results_at_deadline(store, slack, clock):
    store.append(make_result("userid1", "sean", 917, 4))
    scheduler = _scheduler(store, slack, clock)
    scheduler.schedule("testchannel", 917)
    # A late submission before the deadline counts
    store.append(make_result("userid2", "lara", 917, 2))
    await scheduler.wait(917)

    final = slack.texts()[-1]
    assert final.startswith(":confetti_ball: Congratulations to lara!")
    assert "forgot" not in final


@pytest.mark.asyncio
async def test_each_day_is_scheduled_once(store, slack, clock):
    scheduler = _scheduler(store, slack, clock)
    outcomes = [scheduler.schedule("testchannel", 917) for _ in range(5)]
    await scheduler.wait_all()

    assert outcomes == [True, False, False, False, False]
    assert len(scheduler.scheduled) == 1
    assert len(slack.texts()) == 2


@pytest.mark.asyncio
async def test_stale_day_is_never_scheduled(store, slack):
    clock = FakeClock(datetime(2023, 12, 25, 9, 0, tzinfo=LA))
    scheduler = _scheduler(store, slack, clock)

    assert not scheduler.schedule("testchannel", 917)
    assert 917 not in scheduler.scheduled
    assert scheduler.tasks == {}


@pytest.mark.asyncio
async def test_passed_checkpoint_skips_warning(store, slack):
    clock = FakeClock(datetime(2023, 12, 23, 16, 30, tzinfo=LA))
    store.append(make_result("userid1", "sean", 917, 3))
    scheduler = _scheduler(store, slack, clock)

    scheduler.schedule("testchannel", 917)
    await scheduler.wait(917)

    assert clock.sleeps == [30 * 60]
    (final,) = slack.texts()
    assert final.startswith(":confetti_ball:")


@pytest.mark.asyncio
async def test_deadline_rolls_over_after_cutoff(store, slack):
    clock = FakeClock(datetime(2023, 12, 23, 18, 0, tzinfo=LA))
    scheduler = _scheduler(store, slack, clock)

    scheduler.schedule("testchannel", 917)
    await scheduler.wait(917)

    assert clock.sleeps == [22 * 3600, 3600]
    assert clock.now == datetime(2023, 12, 24, 17, 0, tzinfo=LA)
    assert slack.texts()[-1] == "Nobody played Wordle #917 today :cry:"


@pytest.mark.asyncio
async def test_weekly_leaderboard_on_rollup_weekday(store, slack, clock):
    store.append(make_result("userid1", "sean", 917, 3))
    # 2023-12-23 is a Saturday
    scheduler = _scheduler(store, slack, clock, leaderboard_weekday=5)

    scheduler.schedule("testchannel", 917)
    await scheduler.wait(917)

    warning, final, leaderboard = slack.texts()
    assert leaderboard.startswith("```\nPlayer")
    assert "sean" in leaderboard
    assert leaderboard.endswith(":turkey: lara forgot to show up!")


@pytest.mark.asyncio
async def test_no_leaderboard_on_other_days(store, slack, clock):
    scheduler = _scheduler(store, slack, clock, leaderboard_weekday=6)
    scheduler.schedule("testchannel", 917)
    await scheduler.wait(917)
    assert not any(t.startswith("```") for t in slack.texts())


@pytest.mark.asyncio
async def test_collaborator_failures_do_not_escape(store, slack, clock):
    store.fail_reads = True
    scheduler = _scheduler(store, slack, clock, leaderboard_weekday=5)

    scheduler.schedule("testchannel", 917)
    task = scheduler.tasks[917]
    await scheduler.wait(917)

    assert task.done() and task.exception() is None
    assert slack.texts() == []
    assert scheduler.phase(917) == DayPhase.COMPLETED


@pytest.mark.asyncio
async def test_real_sleep_is_not_awaited_by_caller(store, slack):
    # Wall-clock version: the request path returns immediately while the task waits
    now = datetime.now(LA)

    scheduler = DeadlineScheduler(store, slack, ScheduledDays(), tz=LA, bot_name=BOT_NAME)
    day = puzzle_for_now(now, LA)
    assert scheduler.schedule("testchannel", day)
    task = scheduler.tasks[day]
    await asyncio.sleep(0)
    assert not task.done()
    task.cancel()
    await scheduler.wait(day)
    assert task.cancelled()
    assert day not in scheduler.tasks


@pytest.mark.asyncio
async def test_finished_sequences_are_dropped_from_registry(store, slack, clock):
    scheduler = _scheduler(store, slack, clock)
    for day in (917, 918):
        scheduler.schedule("testchannel", day)
    assert sorted(scheduler.tasks) == [917, 918]

    await scheduler.wait_all()

    assert scheduler.tasks == {}
    assert scheduler.phases == {}
    # The day stays claimed, so a repeat arrival still does nothing
    assert not scheduler.schedule("testchannel", 917)
    assert scheduler.phase(917) == DayPhase.COMPLETED
    assert scheduler.phase(919) is None


@pytest.mark.asyncio
async def test_deadline_on_spring_forward_day(store, slack):
    # 2024-03-10 in Los Angeles is 23 hours long; 00:30 PST to 17:00 PDT is 15.5 real hours
    clock = FakeClock(datetime(2024, 3, 10, 0, 30, tzinfo=LA))
    day = puzzle_for_date(date(2024, 3, 10))
    scheduler = _scheduler(store, slack, clock)

    scheduler.schedule("testchannel", day)
    await scheduler.wait(day)

    assert clock.sleeps == [14.5 * 3600, 3600]
    assert sum(clock.sleeps) == 55800
    assert clock.now == datetime(2024, 3, 10, 17, 0, tzinfo=LA)
    assert slack.texts()[0].startswith(f":hourglass: One hour left to play Wordle #{day}!")
