"""Cart Store: the single source of truth for the buyer's cart.

Mutations are synchronous and replace the whole ``CartState`` at once, so
``total_items`` and ``subtotal`` always match the committed items. Every
item-list change is written to the injected storage as a best-effort
background task: the snapshot is serialized immediately, written in the order
the changes happened, and a failed write is logged while the cart keeps
working in memory.
"""

import asyncio
import json

import structlog
from protean.exceptions import ValidationError

from shopping.cart.cart import EMPTY_CART, CartItem, CartState, group_items_by_seller
from shopping.storage import DEFAULT_CART_KEY, CartStorage, cart_key, get_storage

logger = structlog.get_logger(__name__)


class CartStore:
    def __init__(self, storage: CartStorage, key: str = DEFAULT_CART_KEY) -> None:
        self.storage = storage
        self.key = key
        self._state: CartState = EMPTY_CART
        self._loaded = False
        self._pending: set[asyncio.Task] = set()
        self._persist_loop = None
        self._persist_lock = None

    @classmethod
    async def create(cls, storage: CartStorage, key: str = DEFAULT_CART_KEY) -> "CartStore":
        """Build a store and install the persisted cart, if any."""
        store = cls(storage, key=key)
        await store.load()
        return store

    # -------------------------------------------------------------------
    # Read side
    # -------------------------------------------------------------------
    @property
    def state(self) -> CartState:
        return self._state

    @property
    def items(self) -> tuple:
        return self._state.items

    @property
    def total_items(self) -> int:
        return self._state.total_items

    @property
    def subtotal(self) -> int:
        return self._state.subtotal

    @property
    def is_empty(self) -> bool:
        return not self._state.items

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    def _find(self, product_id):
        return next((i for i in self._state.items if i.product_id == str(product_id)), None)

    def get_quantity(self, product_id) -> int:
        item = self._find(product_id)
        return item.quantity if item is not None else 0

    def is_in_cart(self, product_id) -> bool:
        return self._find(product_id) is not None

    def group_by_seller(self) -> list:
        return group_items_by_seller(self._state.items)

    # -------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------
    def add_item(self, product, quantity=1, seller=None) -> None:
        """Add a product to the cart (or increase its quantity if already present)."""
        if quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})

        existing = self._find(product.id)
        if existing is not None:
            items = [
                item.with_quantity(item.quantity + quantity) if item is existing else item
                for item in self._state.items
            ]
        else:
            items = [*self._state.items, CartItem.for_product(product, quantity=quantity, seller=seller)]

        self._commit(items)

    def remove_item(self, product_id) -> None:
        """Remove a product from the cart. Unknown products are ignored."""
        if not self.is_in_cart(product_id):
            return

        self._commit([item for item in self._state.items if item.product_id != str(product_id)])

    def update_quantity(self, product_id, quantity) -> None:
        """Set a product's quantity; zero or less removes it."""
        if quantity <= 0:
            self.remove_item(product_id)
            return

        existing = self._find(product_id)
        if existing is None:
            return

        self._commit(
            [item.with_quantity(quantity) if item is existing else item for item in self._state.items]
        )

    def clear(self) -> None:
        """Empty the cart and delete the persisted snapshot."""
        self._state = EMPTY_CART
        self._schedule(self._delete_snapshot())

    def _commit(self, items) -> None:
        self._state = CartState.from_items(items)
        if self._state.items:
            self._schedule(self._write_snapshot(self.serialize()))
        else:
            self._schedule(self._delete_snapshot())

    # -------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------
    def serialize(self) -> str:
        return json.dumps([item.to_api() for item in self._state.items])

    @staticmethod
    def deserialize(raw: str) -> CartState:
        data = json.loads(raw)
        if not isinstance(data, list):
            raise ValueError("Cart snapshot must be a JSON array")
        return CartState.from_items(CartItem.from_api(entry) for entry in data)

    async def load(self) -> None:
        """Install the persisted cart. Missing or unreadable snapshots leave the cart empty."""
        try:
            raw = await self.storage.get(self.key)
        except Exception as exc:  # noqa: BLE001
            logger.warning("cart_load_failed", key=self.key, error=str(exc))
            raw = None

        if raw:
            try:
                self._state = self.deserialize(raw)
            except (ValueError, TypeError, KeyError, AttributeError, ValidationError) as exc:
                logger.warning("cart_snapshot_malformed", key=self.key, error=str(exc))
        self._loaded = True
        logger.debug("cart_loaded", key=self.key, total_items=self.total_items)

    async def flush(self) -> None:
        """Wait for all scheduled snapshot writes to finish."""
        while True:
            pending = [task for task in self._pending if not task.done()]
            if not pending:
                return
            await asyncio.gather(*pending)

    def _schedule(self, coro) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No event loop (scripts, synchronous callers): write inline.
            asyncio.run(coro)
            return

        task = loop.create_task(coro)
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    def _lock(self) -> asyncio.Lock:
        """The write-ordering lock for the running loop.

        Synchronous callers persist through a fresh ``asyncio.run`` each time,
        and an asyncio lock cannot be shared across loops.
        """
        loop = asyncio.get_running_loop()
        if self._persist_loop is not loop:
            self._persist_loop = loop
            self._persist_lock = asyncio.Lock()
        return self._persist_lock

    async def _write_snapshot(self, snapshot: str) -> None:
        try:
            async with self._lock():
                await self.storage.set(self.key, snapshot)
        except Exception as exc:  # noqa: BLE001
            logger.error("cart_persist_failed", key=self.key, error=str(exc))

    async def _delete_snapshot(self) -> None:
        try:
            async with self._lock():
                await self.storage.delete(self.key)
        except Exception as exc:  # noqa: BLE001
            logger.error("cart_clear_failed", key=self.key, error=str(exc))


async def open_cart(storage: CartStorage | None = None, key: str | None = None) -> CartStore:
    """Load the buyer's cart from the configured storage adapter and key."""
    return await CartStore.create(storage or get_storage(), key=key or cart_key())
