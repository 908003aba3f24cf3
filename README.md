# drpipe

Two small building blocks for pipeline runtimes:

- `drpipe.shared` — `SharedBox`, an awaitable that wraps another awaitable so
  that several tasks can await the same result. The wrapped work runs once;
  every handle to it receives the output.
- `drpipe.tsgen` — generates TypeScript bindings (`mod.ts` plus one file per
  module) from declarative descriptions of command modules.

The package has no runtime dependencies.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Sharing an awaitable

```python
import asyncio
from drpipe.shared import boxed_shared

async def load():
    await asyncio.sleep(0.1)
    return {"ready": True}

async def main():
    shared = boxed_shared(load())
    other = shared.clone()
    a, b = await asyncio.gather(shared, other)
    assert a == b

asyncio.run(main())
```

`boxed_shared(awaitable)` is the same as `SharedBox(awaitable)`. The wrapped
awaitable is scheduled as a task the first time any handle is awaited.

- `clone()` (also used by `copy.copy`) returns a new handle to the same work.
- Each handle may be awaited once; awaiting it again raises `RuntimeError`.
  Clone it first if you need the result again.
- Cancelling one awaiter leaves the shared work running for the others.
- If the wrapped work raises or is cancelled, awaiting raises
  `PoisonedError` (a `RuntimeError`), chained from the original exception.
- `peek()` returns the output once some handle has produced it, and `None`
  before that or once this handle has already delivered its result. It raises
  `PoisonedError` if the work failed.
- `is_terminated()` is true once this handle has delivered its result.
- `ptr_eq(other)` is true when both handles are live and refer to the same
  work; `ptr_hash()` gives a hash consistent with it.
- `downgrade()` returns a `WeakShared` (or `None` once the handle has
  finished). `WeakShared.upgrade()` returns a new `SharedBox` while the shared
  state is still referenced elsewhere, else `None`.

## Generating TypeScript bindings

```python
from drpipe.tsgen import Arg, CommandDef, Module, Ty, generate, generate_ts

tokenize = CommandDef(
    name="tokenize",
    returns=Ty.STRING,
    args=(Arg("model_path", Ty.PATH),),
)
module = Module(name="hfst", commands=(tokenize,))

print(generate_ts(module))
generate("./bindings", [module], index_ts="export class Command {}\n")
```

`generate_ts(module)` returns the source for one module, starting with
`TS_HEADER` (an import of `Arg`, `Command` and `Input` from `./mod.ts`). For
each command it writes:

- for commands with arguments, an options interface named by
  `options_type_name` (first letter upper-cased, plus `Options`; an empty name
  raises `ValueError`);
- overloaded signatures with and without an explicit string id;
- an implementation that returns a `new Command({...})` carrying the id,
  module and command names, input, return type and, where there are any,
  `new Arg(...)` entries for the arguments.

`generate(output_path, modules, index_ts)` creates the directory if needed,
writes `index_ts` to `mod.ts`, and writes `<module name>.ts` for each module.

`Ty` is a flag enum (`PATH`, `STRING`, `JSON`, `BYTES`, `INT`,
`ARRAY_STRING`, `ARRAY_BYTES`, `MAP_PATH`, `MAP_STRING`, `MAP_BYTES`).
`Ty.as_ts_type()` turns a combination of flags into a TypeScript union such as
`string | number`.

## What this package does not do

It does not run pipelines, load modules or keep a registry of them: the
modules to generate bindings for are passed to `generate` by the caller, and
the contents of `mod.ts` (the `Command`, `Arg` and `Input` definitions the
generated files import) must be supplied as `index_ts`.