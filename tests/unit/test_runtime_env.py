import pytest

from emporium.utils.runtime import admin_emails, chat_cookie_max_age, dev_mode_active, live_ping_interval


def test_dev_mode_active_false_when_disabled(monkeypatch):
    monkeypatch.delenv("DEV_MODE", raising=False)
    assert dev_mode_active() is False


def test_dev_mode_active_true_for_localhost(monkeypatch):
    monkeypatch.setenv("DEV_MODE", "true")
    monkeypatch.setenv("APP_BASE_URL", "http://localhost:3000")
    assert dev_mode_active() is True


def test_dev_mode_allowed_host_list(monkeypatch):
    monkeypatch.setenv("DEV_MODE", "true")
    monkeypatch.setenv("APP_BASE_URL", "http://shop.test:8080")
    with pytest.raises(RuntimeError):
        dev_mode_active()
    monkeypatch.setenv("DEV_MODE_ALLOWED_HOSTS", "shop.test, other.test")
    assert dev_mode_active() is True


def test_dev_mode_active_raises_for_remote_host(monkeypatch):
    monkeypatch.setenv("DEV_MODE", "true")
    monkeypatch.setenv("APP_BASE_URL", "https://shop.example.com")
    with pytest.raises(RuntimeError):
        dev_mode_active()


def test_dev_mode_active_without_app_base_requires_allow(monkeypatch):
    monkeypatch.setenv("DEV_MODE", "true")
    monkeypatch.delenv("APP_BASE_URL", raising=False)
    monkeypatch.delenv("ALLOW_DEV_MODE", raising=False)
    monkeypatch.delenv("PYTEST_CURRENT_TEST", raising=False)
    with pytest.raises(RuntimeError):
        dev_mode_active()

    monkeypatch.setenv("ALLOW_DEV_MODE", "true")
    assert dev_mode_active() is True


def test_chat_cookie_max_age(monkeypatch):
    monkeypatch.delenv("CHAT_COOKIE_MAX_AGE_SECONDS", raising=False)
    assert chat_cookie_max_age() == 259200
    monkeypatch.setenv("CHAT_COOKIE_MAX_AGE_SECONDS", "60")
    assert chat_cookie_max_age() == 60
    monkeypatch.setenv("CHAT_COOKIE_MAX_AGE_SECONDS", "soon")
    assert chat_cookie_max_age() == 259200


def test_live_ping_interval(monkeypatch):
    monkeypatch.delenv("LIVE_PING_INTERVAL_SECONDS", raising=False)
    assert live_ping_interval() == 15.0
    monkeypatch.setenv("LIVE_PING_INTERVAL_SECONDS", "3")
    assert live_ping_interval() == 3.0


def test_admin_emails_normalised(monkeypatch):
    monkeypatch.setenv("ADMIN_EMAILS", " Boss@Example.com , ,ops@example.com")
    assert admin_emails() == {"boss@example.com", "ops@example.com"}
