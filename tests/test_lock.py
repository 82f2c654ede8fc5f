"""
ReadWriteLock tests.
"""

import asyncio

import pytest

from beerus.lightclient.lock import ReadWriteLock


class TestReadWriteLock:
    @pytest.mark.asyncio
    async def test_readers_share(self):
        lock = ReadWriteLock()
        await lock.acquire_read()
        await asyncio.wait_for(lock.acquire_read(), 0.1)
        assert lock.readers == 2
        await lock.release_read()
        await lock.release_read()
        assert lock.readers == 0

    @pytest.mark.asyncio
    async def test_writer_exclusive(self):
        lock = ReadWriteLock()
        await lock.acquire_write()
        assert lock.write_locked

        with pytest.raises(asyncio.TimeoutError):
            await asyncio.wait_for(lock.acquire_read(), 0.05)
        with pytest.raises(asyncio.TimeoutError):
            await asyncio.wait_for(lock.acquire_write(), 0.05)

        await lock.release_write()
        await asyncio.wait_for(lock.acquire_read(), 0.1)
        assert lock.readers == 1

    @pytest.mark.asyncio
    async def test_writer_waits_for_readers(self):
        lock = ReadWriteLock()
        await lock.acquire_read()
        writer = asyncio.create_task(lock.acquire_write())
        await asyncio.sleep(0.01)
        assert not writer.done()

        await lock.release_read()
        await asyncio.wait_for(writer, 0.1)
        assert lock.write_locked

    @pytest.mark.asyncio
    async def test_writer_preference(self):
        lock = ReadWriteLock()
        order = []

        async def reader(name):
            async with lock.read():
                order.append(name)

        async def writer():
            async with lock.write():
                order.append("writer")

        await lock.acquire_read()
        w = asyncio.create_task(writer())
        await asyncio.sleep(0.01)
        # Arrives after the writer queued: must wait behind it
        r = asyncio.create_task(reader("late-reader"))
        await asyncio.sleep(0.01)
        assert order == []

        await lock.release_read()
        await asyncio.gather(w, r)
        assert order == ["writer", "late-reader"]

    @pytest.mark.asyncio
    async def test_cancelled_writer_unblocks_readers(self):
        lock = ReadWriteLock()
        await lock.acquire_read()
        writer = asyncio.create_task(lock.acquire_write())
        await asyncio.sleep(0.01)

        writer.cancel()
        with pytest.raises(asyncio.CancelledError):
            await writer

        await asyncio.wait_for(lock.acquire_read(), 0.1)
        assert lock.readers == 2

    @pytest.mark.asyncio
    async def test_release_without_hold(self):
        lock = ReadWriteLock()
        with pytest.raises(RuntimeError):
            await lock.release_read()
        with pytest.raises(RuntimeError):
            await lock.release_write()

    @pytest.mark.asyncio
    async def test_context_managers_release_on_error(self):
        lock = ReadWriteLock()
        with pytest.raises(ValueError):
            async with lock.write():
                raise ValueError("boom")
        assert not lock.write_locked

        with pytest.raises(ValueError):
            async with lock.read():
                raise ValueError("boom")
        assert lock.readers == 0

    @pytest.mark.asyncio
    async def test_repeated_cancel_during_release(self):
        lock = ReadWriteLock()
        entered = asyncio.Event()

        async def reader():
            async with lock.read():
                entered.set()
                await asyncio.sleep(10)

        task = asyncio.create_task(reader())
        await entered.wait()

        # Hold the condition so the release has to wait for it
        async with lock._cond:
            task.cancel()
            await asyncio.sleep(0)
            await asyncio.sleep(0)
            task.cancel()
            await asyncio.sleep(0)

        with pytest.raises(asyncio.CancelledError):
            await task
        await asyncio.sleep(0.01)
        assert lock.readers == 0
        await asyncio.wait_for(lock.acquire_write(), 0.1)
