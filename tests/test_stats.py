from cloudwordle.config.game_settings import STATS_KEY
from cloudwordle.models.stats import Stats
from cloudwordle.services.stats_service import StatsAggregator
from conftest import FakeStatsStore


def test_win_increments_counters(storage):
    aggregator = StatsAggregator(storage)
    aggregator.load()
    stats = aggregator.record_win("CRANE", 3)

    assert stats == Stats(games_played=1, games_won=1, current_streak=1, max_streak=1)
    assert storage.get(STATS_KEY) == stats.to_dict()


def test_max_streak_only_grows(storage):
    storage.set(STATS_KEY, {"games_played": 5, "games_won": 4, "current_streak": 1, "max_streak": 3})
    aggregator = StatsAggregator(storage)
    aggregator.load()

    aggregator.record_win()
    assert aggregator.stats.max_streak == 3
    aggregator.record_win()
    aggregator.record_win()
    assert aggregator.stats.current_streak == 4
    assert aggregator.stats.max_streak == 4


def test_loss_resets_streak(storage):
    storage.set(STATS_KEY, {"games_played": 2, "games_won": 2, "current_streak": 2, "max_streak": 2})
    aggregator = StatsAggregator(storage)
    aggregator.load()
    stats = aggregator.record_loss("CRANE", 6)

    assert stats.games_played == 3
    assert stats.games_won == 2
    assert stats.current_streak == 0
    assert stats.max_streak == 2


def test_win_rate_is_derived():
    assert Stats().win_rate == 0
    assert Stats(games_played=3, games_won=2).win_rate == 67


def test_win_rate_rounds_halves_up():
    assert Stats(games_played=8, games_won=1).win_rate == 13
    assert Stats(games_played=8, games_won=5).win_rate == 63
    assert Stats(games_played=200, games_won=1).win_rate == 1


def test_cloud_stats_take_precedence(storage):
    storage.set(STATS_KEY, {"games_played": 1})
    remote = {"games_played": 9, "games_won": 7, "current_streak": 2, "max_streak": 5, "_id": "x"}
    aggregator = StatsAggregator(storage, FakeStatsStore(remote=remote))
    assert aggregator.load().games_played == 9


def test_cloud_failure_falls_back_to_local(storage):
    storage.set(STATS_KEY, {"games_played": 4, "games_won": 1, "current_streak": 0, "max_streak": 1})
    aggregator = StatsAggregator(storage, FakeStatsStore(fail_load=True))
    assert aggregator.load().games_played == 4


def test_missing_everywhere_uses_defaults(storage):
    aggregator = StatsAggregator(storage, FakeStatsStore(remote=None))
    assert aggregator.load() == Stats()


def test_corrupt_local_stats_use_defaults(storage):
    storage.set(STATS_KEY, {"games_played": -1})
    assert StatsAggregator(storage).load() == Stats()


def test_remote_save_gets_game_details(storage):
    store = FakeStatsStore()
    aggregator = StatsAggregator(storage, store)
    aggregator.record_win("CRANE", 3)

    saved, target_word, won, attempts = store.saved[0]
    assert saved["games_won"] == 1
    assert (target_word, won, attempts) == ("CRANE", True, 3)


def test_remote_save_failure_keeps_local_write(storage):
    aggregator = StatsAggregator(storage, FakeStatsStore(fail_save=True))
    aggregator.record_loss("CRANE", 6)
    assert storage.get(STATS_KEY)["games_played"] == 1
