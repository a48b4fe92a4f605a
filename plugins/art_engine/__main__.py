"""
Art Engine - Command Line

Usage:
    python -m art_engine list [--json]
    python -m art_engine render [engine|preset] [options]

Render options:
    --size WxH          grid size in cells, or N for NxN (default 256x256)
    --steps N           simulation steps (default 1000)
    --seed N            PRNG seed (default 42)
    --palette NAME      ocean, neon, earth, monochrome, vapor, fire
    --params JSON       engine parameter overrides, e.g. '{"feed_rate": 0.04}'
    --output PATH       PNG to write (default output.png)
    --from-seed PATH    rerun a saved seed file (replaces engine, size,
                        steps, seed and params)
    --save-seed PATH    also write the run as a seed file
    --json              machine-readable output
    --verbose           log progress to stderr

Examples:
    python -m art_engine render
    python -m art_engine render mitosis --size 512 --steps 5000
    python -m art_engine render gray-scott --params '{"kill_rate": 0.06}'
    python -m art_engine render --from-seed piece.json --palette fire

Exit codes:
    0 ok, 2 usage, 10 engine error, 11 I/O error, 12 bad input,
    13 seed file could not be parsed or written
"""

import json
import logging
import sys

from pydantic import ValidationError

from .colormaps import DEFAULT_PALETTE, PALETTE_ORDER, get_palette
from .engines import ENGINE_CLASSES, list_engines, run_seed
from .errors import EngineError, EngineIOError, InvalidColorError, InvalidPaletteError
from .presets import PRESETS, list_presets
from .seed import U64_MAX, Seed
from .snapshot import write_png

EXIT_OK = 0
EXIT_USAGE = 2
EXIT_ENGINE = 10
EXIT_IO = 11
EXIT_INPUT = 12
EXIT_SERIALIZATION = 13

DEFAULT_TARGET = "gray-scott"
DEFAULT_SIZE = (256, 256)
DEFAULT_STEPS = 1000
DEFAULT_SEED = 42
DEFAULT_OUTPUT = "output.png"

# Options that take a value, and the ones a seed file replaces
_VALUE_OPTIONS = ("--size", "--steps", "--seed", "--palette", "--params",
                  "--output", "--from-seed", "--save-seed")
_RUN_OPTIONS = ("--size", "--steps", "--seed", "--params")


class CLIError(Exception):
    """A failure with a process exit code attached."""

    def __init__(self, message, exit_code):
        super().__init__(message)
        self.exit_code = exit_code


def _usage(message):
    return CLIError(f"{message} (use --help for usage)", EXIT_USAGE)


def parse_args(args):
    """Split argv into (command, target, options, flags)."""
    command = None
    target = None
    options = {}
    flags = set()
    i = 0
    while i < len(args):
        arg = args[i]
        if arg in ("--help", "-h", "--json", "--verbose"):
            flags.add(arg)
            i += 1
        elif arg in _VALUE_OPTIONS:
            if i + 1 >= len(args):
                raise _usage(f"{arg} needs a value")
            options[arg] = args[i + 1]
            i += 2
        elif arg.startswith("-"):
            raise _usage(f"unknown option: {arg}")
        elif command is None:
            command = arg
            i += 1
        elif target is None:
            target = arg
            i += 1
        else:
            raise _usage(f"unexpected argument: {arg}")
    return command, target, options, flags


def _parse_size(text):
    parts = text.lower().split("x")
    try:
        if len(parts) == 1:
            w = h = int(parts[0])
        elif len(parts) == 2:
            w, h = int(parts[0]), int(parts[1])
        else:
            raise ValueError(text)
    except ValueError:
        raise _usage(f"--size expects WxH or N, got {text!r}") from None
    if w < 0 or h < 0:
        raise _usage(f"--size must not be negative, got {text!r}")
    return w, h


def _parse_uint(name, text, upper=None):
    try:
        value = int(text)
    except ValueError:
        raise _usage(f"{name} expects an integer, got {text!r}") from None
    if value < 0 or (upper is not None and value > upper):
        raise _usage(f"{name} out of range: {value}")
    return value


def _parse_params(text):
    try:
        params = json.loads(text)
    except json.JSONDecodeError as e:
        raise CLIError(f"invalid --params JSON: {e}", EXIT_INPUT) from e
    if not isinstance(params, dict):
        raise CLIError("--params must be a JSON object", EXIT_INPUT)
    return params


def _read_seed(path):
    try:
        with open(path, encoding="utf-8") as f:
            text = f.read()
    except OSError as e:
        raise CLIError(f"cannot read seed file {path}: {e}", EXIT_IO) from e
    try:
        return Seed.from_json(text)
    except ValidationError as e:
        raise CLIError(f"invalid seed file {path}: {e}", EXIT_SERIALIZATION) from e


def _write_seed(seed, path):
    try:
        with open(path, "w", encoding="utf-8") as f:
            f.write(seed.to_json())
            f.write("\n")
    except OSError as e:
        raise CLIError(f"cannot write seed file {path}: {e}", EXIT_IO) from e


def resolve_run(target, options):
    """Build the Seed and default palette name for a render."""
    if "--from-seed" in options:
        clash = [o for o in _RUN_OPTIONS if o in options]
        if target is not None or clash:
            raise _usage("--from-seed cannot be combined with "
                         + ", ".join(clash or ["an engine or preset"]))
        return _read_seed(options["--from-seed"]), DEFAULT_PALETTE

    target = target or DEFAULT_TARGET
    if target in ENGINE_CLASSES:
        engine, params, palette = target, {}, DEFAULT_PALETTE
    elif target in PRESETS:
        p = PRESETS[target]
        engine, params, palette = p["engine"], dict(p["params"]), p["palette"]
    else:
        # Let the registry report it
        engine, params, palette = target, {}, DEFAULT_PALETTE

    if "--params" in options:
        params.update(_parse_params(options["--params"]))
    width, height = _parse_size(options["--size"]) if "--size" in options else DEFAULT_SIZE
    seed = Seed(
        engine=engine,
        width=width,
        height=height,
        params=params,
        seed=_parse_uint("--seed", options.get("--seed", DEFAULT_SEED), U64_MAX),
        steps=_parse_uint("--steps", options.get("--steps", DEFAULT_STEPS)),
    )
    return seed, palette


def cmd_list(as_json):
    engines = list(list_engines())
    presets = list_presets()
    if as_json:
        print(json.dumps({
            "engines": engines,
            "palettes": list(PALETTE_ORDER),
            "presets": [key for key, _, _ in presets],
        }, indent=2))
        return EXIT_OK

    print("Engines:")
    for name in engines:
        print(f"  {name:16s} {ENGINE_CLASSES[name].engine_label}")
    print("Palettes:")
    print(f"  {', '.join(PALETTE_ORDER)}")
    print("Presets:")
    for key, name, desc in presets:
        print(f"  {key:16s} {name:12s} {desc}")
    return EXIT_OK


def cmd_render(target, options, as_json):
    seed, palette_name = resolve_run(target, options)
    palette_name = options.get("--palette", palette_name)
    palette = get_palette(palette_name)
    output = options.get("--output", DEFAULT_OUTPUT)

    # Never save a seed that cannot be replayed
    seed.validate_dimensions()
    if "--save-seed" in options:
        _write_seed(seed, options["--save-seed"])

    eng = run_seed(seed)
    write_png(eng.field, palette, output)

    if as_json:
        print(json.dumps({
            "engine": seed.engine,
            "width": seed.width,
            "height": seed.height,
            "steps": seed.steps,
            "seed": seed.seed,
            "palette": palette_name,
            "output": str(output),
        }, indent=2))
    else:
        print(f"rendered {seed.engine} ({seed.width}x{seed.height}, "
              f"{seed.steps} steps, seed {seed.seed}) -> {output}")
    return EXIT_OK


def _run(args):
    command, target, options, flags = parse_args(args)
    if "--help" in flags or "-h" in flags:
        print(__doc__)
        return EXIT_OK
    if "--verbose" in flags:
        logging.basicConfig(level=logging.DEBUG,
                            format="%(levelname)s %(name)s: %(message)s")

    as_json = "--json" in flags
    if command == "list":
        if target is not None or options:
            raise _usage("list takes no arguments")
        return cmd_list(as_json)
    if command == "render":
        return cmd_render(target, options, as_json)
    if command is None:
        raise _usage("missing command")
    raise _usage(f"unknown command: {command}")


def _exit_code(e):
    if isinstance(e, CLIError):
        return e.exit_code
    if isinstance(e, EngineIOError):
        return EXIT_IO
    if isinstance(e, (InvalidPaletteError, InvalidColorError)):
        return EXIT_INPUT
    return EXIT_ENGINE


def main(argv=None):
    args = sys.argv[1:] if argv is None else list(argv)
    try:
        return _run(args)
    except (CLIError, EngineError) as e:
        code = _exit_code(e)
        if "--json" in args:
            print(json.dumps({"error": str(e), "exit_code": code}, indent=2),
                  file=sys.stderr)
        else:
            print(f"error: {e}", file=sys.stderr)
        return code


if __name__ == "__main__":
    sys.exit(main())
