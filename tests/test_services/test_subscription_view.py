from peerdraft.schemas.settings import PluginSettings
from peerdraft.services.subscription_view import (
    HOBBY_DESCRIPTION,
    PROFESSIONAL_DESCRIPTION,
    build_subscription_view,
)


def _settings(plan, duration=0):
    return PluginSettings.model_validate(
        {
            "signaling": ["wss://subs.test/signal"],
            "subscriptionAPI": "https://subs.test/subscription",
            "connectAPI": "https://subs.test/subscription/connect",
            "basePath": "https://subs.test/cm/",
            "name": "Ada",
            "oid": "a b",
            "plan": plan,
            "duration": duration,
        }
    )


def test_hobby_view(config):
    view = build_subscription_view(_settings({"type": "hobby", "email": ""}, 30), config)
    assert view.description == HOBBY_DESCRIPTION
    assert view.minutes_used == 30
    assert isinstance(view.minutes_used, int)
    assert view.email is None
    assert view.checkout_url == "https://peerdraft.app/checkout?oid=a+b"


def test_professional_view(config):
    view = build_subscription_view(_settings({"type": "professional", "email": "ada@x.com"}), config)
    assert view.description == PROFESSIONAL_DESCRIPTION
    assert view.email == "ada@x.com"
    assert view.checkout_url is None
