from typing import Awaitable, Callable, Generic, TypeVar

from pymongo.errors import PyMongoError

from catalog.utils.exceptions import InternalFault
from catalog.utils.logging import get_logger

T = TypeVar("T")

logger = get_logger(__name__)


class BaseService(Generic[T]):
    def __init__(self, collection):
        self.collection = collection

    async def _handle_db_operation(self, operation: Callable[[], Awaitable[T]]) -> T:
        try:
            return await operation()
        except PyMongoError as e:
            logger.error(f"Database operation error: {e}")
            raise InternalFault(f"Database operation error: {e}") from e
