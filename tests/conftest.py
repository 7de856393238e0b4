import pytest

from tests.utils import FakeArtifactory, make_client


@pytest.fixture
def fake_artifactory() -> FakeArtifactory:
    return FakeArtifactory()


@pytest.fixture
async def artifactory_server(aiohttp_server, fake_artifactory):
    """Event service fake served on a local port."""
    return await aiohttp_server(fake_artifactory.make_app())


@pytest.fixture
async def artifactory_client(artifactory_server):
    async with make_client(artifactory_server) as client:
        yield client
