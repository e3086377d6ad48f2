"""Mock module initialization."""
from tests.mocks.fake_redis import FakeRedis

__all__ = ['FakeRedis']
