import asyncio
import multiprocessing

import ipcall
from ipcall import PipeTransport, RemoteError


def worker(conn):
    # The other execution context: its own process, its own loop
    asyncio.run(_serve(conn))


async def _serve(conn):
    done = asyncio.Event()
    ch = ipcall.connect(PipeTransport(conn))

    async def slow_upper(text):
        await asyncio.sleep(0.2)
        return text.upper()

    def divide(x, y):
        return x / y

    ch.receive("add", lambda x, y: x + y)
    ch.receive("upper", slow_upper)
    ch.receive("divide", divide)
    ch.receive("shutdown", done.set)

    await done.wait()
    await asyncio.sleep(0.1)
    ch.close()


async def main():
    here, there = multiprocessing.Pipe()
    proc = multiprocessing.Process(target=worker, args=(there,), daemon=True)
    proc.start()

    ipcall.bind(PipeTransport(here))

    # upper() is slower than add(), replies still land on the right call
    shout, total = await asyncio.gather(ipcall.call("upper", "hello"), ipcall.call("add", 2, 3))
    print("upper ->", shout)
    print("add   ->", total)

    try:
        await ipcall.call("divide", 1, 0)
    except RemoteError as e:
        print("divide failed remotely:", e.remote_type, e)

    await ipcall.call("shutdown")
    ipcall.unbind()
    proc.join(timeout=2)


if __name__ == "__main__":
    asyncio.run(main())
