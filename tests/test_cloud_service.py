from unittest.mock import MagicMock
import pytest
from cloudwordle.models.stats import Stats
from cloudwordle.services import cloud_service
from cloudwordle.services.cloud_service import CloudStore, PlayerProfileStore, PlayerStatsStore

PLAYER = "0123456789abcdef0123456789abcdef"


@pytest.fixture
def cloud():
    return CloudStore(client=MagicMock(), db_name="test_db")


def test_requires_uri_or_client():
    with pytest.raises(ValueError):
        CloudStore()


def test_initialize_without_uri_runs_local_only():
    assert cloud_service.initialize_cloud_store(None) is None
    assert cloud_service.get_cloud_store() is None


def test_save_stats_upserts_and_records_history(cloud):
    stats = Stats(games_played=3, games_won=2, current_streak=1, max_streak=2)
    assert cloud.save_stats(PLAYER, stats, target_word="CRANE", won=True, attempts=4) is True

    query, update = cloud.stats_collection.update_one.call_args[0]
    assert query == {"player_id": PLAYER}
    assert update["$set"]["games_won"] == 2
    assert update["$set"]["win_rate"] == 67
    assert cloud.stats_collection.update_one.call_args[1] == {"upsert": True}

    history = cloud.history_collection.insert_one.call_args[0][0]
    assert history["target_word"] == "CRANE"
    assert history["won"] is True
    assert history["attempts"] == 4


def test_save_stats_without_details_skips_history(cloud):
    cloud.save_stats(PLAYER, Stats())
    cloud.history_collection.insert_one.assert_not_called()


def test_load_stats(cloud):
    cloud.stats_collection.find_one.return_value = {
        "_id": "abc", "player_id": PLAYER, "games_played": 4, "games_won": 1,
        "current_streak": 0, "max_streak": 1, "win_rate": 25,
    }
    assert cloud.load_stats(PLAYER) == Stats(4, 1, 0, 1)

    cloud.stats_collection.find_one.return_value = None
    assert cloud.load_stats(PLAYER) is None


@pytest.mark.parametrize("display_name, email, error", [
    ("", "ada@example.com", "Display name and email are required"),
    ("Ada", "", "Display name and email are required"),
    ("A" * 41, "ada@example.com", "Display name must be at most 40 characters"),
    ("Ada", "not-an-email", "Email address is not valid"),
])
def test_create_profile_validation(cloud, display_name, email, error):
    result = cloud.create_profile(PLAYER, display_name, email)
    assert result == {"success": False, "error": error}
    cloud.players_collection.update_one.assert_not_called()


def test_create_profile(cloud):
    cloud.players_collection.find_one.return_value = None
    result = cloud.create_profile(PLAYER, "  Ada ", "ADA@Example.com")

    assert result["success"] is True
    profile = result["profile"]
    assert profile.display_name == "Ada"
    assert profile.email == "ada@example.com"
    assert profile.avatar_url == "🎮"
    cloud.players_collection.update_one.assert_called_once()


def test_create_profile_twice_is_refused(cloud):
    cloud.players_collection.find_one.return_value = {"player_id": PLAYER, "is_claimed": True}
    result = cloud.create_profile(PLAYER, "Ada", "ada@example.com")
    assert result == {"success": False, "error": "Profile already exists"}


def test_unclaimed_profile_reads_as_none(cloud):
    cloud.players_collection.find_one.return_value = {"player_id": PLAYER, "is_claimed": False}
    assert cloud.get_profile(PLAYER) is None


def test_delete_profile(cloud):
    cloud.players_collection.update_one.return_value = MagicMock(modified_count=1)
    assert cloud.delete_profile(PLAYER) is True
    cloud.players_collection.update_one.return_value = MagicMock(modified_count=0)
    assert cloud.delete_profile(PLAYER) is False


def _stats_doc(player_id, played, won, current, best):
    return {"player_id": player_id, "games_played": played, "games_won": won,
            "current_streak": current, "max_streak": best}


def test_leaderboard_ranks_claimed_players(cloud):
    cloud.players_collection.find.return_value = [
        {"player_id": "a", "display_name": "Ada", "avatar_url": "🦊", "is_claimed": True},
        {"player_id": "b", "display_name": "Bob", "is_claimed": True},
        {"player_id": "c", "display_name": "Cy", "is_claimed": True},
    ]
    cloud.stats_collection.find.return_value = [
        _stats_doc("a", 10, 5, 1, 4),
        _stats_doc("b", 4, 4, 4, 4),
        _stats_doc("c", 0, 0, 0, 0),
    ]

    by_streak = cloud.leaderboard(sort_by="streak")
    assert [entry.player_id for entry in by_streak] == ["a", "b"]
    assert by_streak[1].avatar_url == "🎮"

    by_rate = cloud.leaderboard(sort_by="win_rate", limit=1)
    assert [entry.player_id for entry in by_rate] == ["b"]


def test_leaderboard_without_profiles(cloud):
    cloud.players_collection.find.return_value = []
    assert cloud.leaderboard() == []
    cloud.stats_collection.find.assert_not_called()


def test_leaderboard_rejects_unknown_sort(cloud):
    with pytest.raises(ValueError):
        cloud.leaderboard(sort_by="fastest")


def test_player_bound_stores_delegate():
    cloud = MagicMock()
    stats = Stats(1, 1, 1, 1)

    PlayerStatsStore(cloud, PLAYER).save_stats(stats, target_word="CRANE", won=True, attempts=2)
    cloud.save_stats.assert_called_once_with(PLAYER, stats, "CRANE", True, 2)

    PlayerProfileStore(cloud, PLAYER).create_profile("Ada", "ada@example.com")
    cloud.create_profile.assert_called_once_with(PLAYER, "Ada", "ada@example.com", None)
