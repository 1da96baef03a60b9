import pytest

from chatrelay.config import settings


@pytest.fixture(autouse=True)
def settings_env(monkeypatch):
    """Point settings at test values; outbound calls are always mocked."""
    monkeypatch.setenv("CLIENT_ID", "test-client-id")
    monkeypatch.setattr(settings, "client_id", "test-client-id")
    monkeypatch.setattr(settings, "twitch_bot_token", "oauth:test-token")
    monkeypatch.setattr(settings, "tmi_base_url", "http://tmi.test/group/user/")
    monkeypatch.setattr(settings, "helix_base_url", "https://helix.test/helix")
    yield


@pytest.fixture
def sample_chatters():
    """TMI chatter listing as returned for a small channel."""
    return {
        "_links": {},
        "chatter_count": 6,
        "chatters": {
            "broadcaster": ["streamer"],
            "vips": ["VipPerson"],
            "moderators": ["ModPerson", "StreamElements"],
            "staff": ["StaffPerson"],
            "admins": [],
            "global_mods": [],
            "viewers": ["lurker_1", "Chatty"],
        },
    }
