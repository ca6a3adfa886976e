import pytest

from docrelay.config import RelaySettings
from fakes import FakePage, FakePlaywrightFactory


@pytest.fixture
def settings(tmp_path) -> RelaySettings:
    return RelaySettings(
        element_timeout_ms=50,
        auth_check_timeout_ms=50,
        verify_timeout_ms=50,
        navigation_timeout_ms=100,
        credentials_dir=str(tmp_path / "credentials"),
    )


@pytest.fixture
def fake_page() -> FakePage:
    return FakePage()


@pytest.fixture
def playwright_factory(fake_page) -> FakePlaywrightFactory:
    return FakePlaywrightFactory(fake_page)
