"""Lifecycle contract for stateful, asynchronous tests.

A test's state type subclasses Lifecycle and provides two hooks:

- ``before()``: async classmethod that builds the state (required)
- ``after()``: async method that cleans it up (optional, no-op by default)

The phases are only ever driven by the sealed entry points ``test``,
``test_sync`` and ``session``.

Example:
    class PostgresTest(Lifecycle):
        def __init__(self, conn: asyncpg.Connection) -> None:
            self.conn = conn

        @classmethod
        async def before(cls) -> "PostgresTest":
            conn = await asyncpg.connect("postgresql://localhost/postgres")
            await conn.execute("CREATE TABLE my_test_table ()")
            return cls(conn)

        async def after(self) -> None:
            await self.conn.execute("DROP TABLE my_test_table")
            await self.conn.close()

    async def test_adds_queryable_test_table():
        async def body(ctx: SharedState[PostgresTest]) -> None:
            await ctx.conn.fetch("SELECT FROM my_test_table")

        await PostgresTest.test(body)
"""

import abc
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any, ClassVar, Optional, Self, final

from .config import RunnerConfig
from .exceptions import AfterError, BeforeError, ContractError
from .runner import Runner, SyncRunner, TestBody, log_masked_after_error
from .shared import SharedState


class Lifecycle(abc.ABC):
    """
    Base class for a test's state.

    Subclasses implement ``before`` and optionally ``after``. Defining
    ``test``, ``test_sync`` or ``session`` in a subclass raises
    ContractError when the class is created.
    """

    __test__ = False  # not a pytest test class, whatever the subclass is called

    _SEALED: ClassVar[tuple[str, ...]] = ("test", "test_sync", "session")

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        # Resolve through the MRO so mixins cannot shadow a sealed member either
        for member in Lifecycle._SEALED:
            sealed = Lifecycle.__dict__[member].__func__
            resolved = getattr(cls, member, None)
            if getattr(resolved, "__func__", None) is not sealed:
                raise ContractError(cls.__name__, member)

    # -------------------------------------------------------------------------
    # Hooks
    # -------------------------------------------------------------------------

    @classmethod
    @abc.abstractmethod
    async def before(cls) -> Self:
        """
        Build a new instance of the test's state.

        Runs once per invocation. Raise to fail the invocation; ``after``
        does not run in that case, so clean up any partial work before
        raising.
        """

    async def after(self) -> None:
        """
        Clean up after the test body.

        Runs once per invocation whenever ``before`` succeeded, whether or
        not the test body passed. Raise to report a teardown failure. The
        test body may still hold a handle to this instance while ``after``
        runs.
        """
        return None

    # -------------------------------------------------------------------------
    # Entry points
    # -------------------------------------------------------------------------

    @final
    @classmethod
    async def test(cls, body: TestBody, *, runner: Optional[Runner] = None) -> None:
        """
        Run ``before`` -> ``body`` -> ``after`` and report any failure.

        Args:
            body: Async callable receiving a SharedState handle to the state
            runner: Runner to use (default: Runner configured from the
                environment, reporting by raising LifecycleFailure)
        """
        if runner is None:
            runner = Runner()
        await runner.run(cls, body)

    @final
    @classmethod
    def test_sync(cls, body: TestBody, *, runner: Optional[Runner] = None) -> None:
        """
        Synchronous variant of ``test`` for non-async test functions.

        Drives the invocation to completion on a private event loop.
        """
        with SyncRunner(runner=runner) as sync_runner:
            sync_runner.run(cls, body)

    @final
    @classmethod
    @asynccontextmanager
    async def session(
        cls, *, config: Optional[RunnerConfig] = None
    ) -> AsyncIterator[SharedState[Self]]:
        """
        Run the lifecycle around an ``async with`` block.

        Yields a SharedState handle to the state built by ``before``.
        ``after`` runs when the block exits, whether or not it raised. If
        the block raised, its exception propagates and an ``after`` failure
        is only logged, as Runner does; otherwise an ``after`` failure
        raises AfterError.

        Args:
            config: Logging configuration (default: read from the environment)

        Raises:
            BeforeError: If ``before`` fails (the block does not run)
            AfterError: If ``after`` fails after the block succeeded

        Example:
            async with PostgresTest.session() as ctx:
                await ctx.conn.fetch("SELECT FROM my_test_table")
        """
        if config is None:
            config = RunnerConfig.from_env()

        try:
            state = await cls.before()
        except Exception as e:
            raise BeforeError(e) from e

        handle = SharedState(state)
        try:
            yield handle
        except Exception:
            try:
                await state.after()
            except Exception as after_error:
                log_masked_after_error(cls.__name__, after_error, config)
            raise
        else:
            try:
                await state.after()
            except Exception as e:
                raise AfterError(e) from e
        finally:
            handle.release()
