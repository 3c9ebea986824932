from __future__ import annotations
import logging
import os
import sys
from typing import Optional
from config import RenderOptions
from document import load_document
from renderer import render_document

logger = logging.getLogger(__name__)

USAGE = """SVG scene renderer
Usage: python main.py <svg_file1> [svg_file2] ... [options]

Options:
  -v, --verbose         Print detailed information
  -d, --debug           Print the scene debug lines for each file
  -o, --output PATH     Specify output directory or file
  -w, --width WIDTH     Override output width in pixels
  -h, --height HEIGHT   Override output height in pixels
  -b, --background RGB  Background color as R,G,B (default: 255,255,255)
  -aa, --anti-aliasing  Enable anti-aliasing (default: off)
  --skip-render         Skip rendering (only parse and build the scene)

Examples:
  python main.py test.svg
  python main.py *.svg -v
  python main.py test.svg -w 800 -h 600
  python main.py test.svg -b 0,0,0  # Black background"""

class UsageError(ValueError):
    pass

def configure_logging(verbose: bool):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

def process_svg_file(svg_path: str, output_path: Optional[str] = None,
                     options: Optional[RenderOptions] = None, verbose: bool = False,
                     skip_render: bool = False, debug: bool = False) -> bool:
    options = options or RenderOptions()

    if not os.path.exists(svg_path):
        print(f"Error: File not found: {svg_path}")
        return False

    if not svg_path.lower().endswith('.svg'):
        print(f"Warning: {svg_path} does not have .svg extension")

    try:
        with open(svg_path, 'r', encoding='utf-8') as file:
            text = file.read()
    except (OSError, UnicodeDecodeError) as e:
        print(f"Error reading {svg_path}: {e}")
        return False

    result = load_document(text, options.default_size)
    if not result.ok:
        print(f"Error: {svg_path}: {result.error}")
        return False

    document = result.document
    if verbose:
        print(f"\nProcessing: {svg_path}")
        print(f"Document: {document.width:g}x{document.height:g}")
        print(f"ViewBox: {document.viewbox}")

    if debug:
        for line in document.collect_debug_info():
            print(line)

    if skip_render:
        print(f"[OK] Parsed: {svg_path} (rendering skipped)")
        return True

    if output_path is None:
        base_name = os.path.splitext(os.path.basename(svg_path))[0]
        output_path = f"{base_name}.png"

    try:
        canvas = render_document(document, options)
        canvas.save(output_path)
    except (OSError, ValueError) as e:
        print(f"Error rendering {svg_path}: {e}")
        logger.debug("Render failure", exc_info=True)
        return False

    if verbose:
        print(f"[OK] Rendered {canvas.width}x{canvas.height} and saved: {output_path}")
    else:
        print(f"[OK] {svg_path} -> {output_path}")
    return True

def _take_value(args: list[str], i: int, flag: str) -> str:
    if i + 1 >= len(args):
        raise UsageError(f"{flag} requires a value")
    return args[i + 1]

def _positive_int(value: str, name: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise UsageError(f"{name} must be an integer")
    if number <= 0:
        raise UsageError(f"{name} must be positive")
    return number

def _parse_background(value: str) -> tuple[int, int, int]:
    rgb_parts = value.split(',')
    if len(rgb_parts) != 3:
        raise UsageError("Background must be R,G,B (e.g., 255,255,255)")
    try:
        r, g, b = (max(0, min(255, int(part.strip()))) for part in rgb_parts)
    except ValueError:
        raise UsageError("Background must be R,G,B integers (e.g., 255,255,255)")
    return (r, g, b)

def parse_arguments(args: list[str]) -> dict:
    """Turn argv into settings; raises UsageError for bad flags or values."""
    settings = {
        'verbose': False,
        'debug': False,
        'output': None,
        'skip_render': False,
        'options': RenderOptions(),
        'files': [],
    }
    options = settings['options']

    i = 0
    while i < len(args):
        arg = args[i]
        if arg in ['-v', '--verbose']:
            settings['verbose'] = True
        elif arg in ['-d', '--debug']:
            settings['debug'] = True
        elif arg in ['-o', '--output']:
            settings['output'] = _take_value(args, i, arg)
            i += 1
        elif arg in ['-w', '--width']:
            options.width = _positive_int(_take_value(args, i, arg), "Width")
            i += 1
        elif arg in ['-h', '--height']:
            options.height = _positive_int(_take_value(args, i, arg), "Height")
            i += 1
        elif arg in ['-b', '--background']:
            options.background = _parse_background(_take_value(args, i, arg))
            i += 1
        elif arg in ['-aa', '--anti-aliasing']:
            if i + 1 < len(args) and not args[i + 1].startswith('-') and not args[i + 1].lower().endswith('.svg'):
                aa_value = args[i + 1].lower()
                if aa_value in ['true', '1', 'yes', 'on']:
                    options.anti_aliasing = True
                elif aa_value in ['false', '0', 'no', 'off']:
                    options.anti_aliasing = False
                else:
                    raise UsageError("-aa/--anti-aliasing requires true/false, 1/0, yes/no, or on/off")
                i += 1
            else:
                options.anti_aliasing = True
        elif arg == '--skip-render':
            settings['skip_render'] = True
        elif arg.startswith('-'):
            raise UsageError(f"Unknown option: {arg}")
        else:
            settings['files'].append(arg)
        i += 1

    if not settings['files']:
        raise UsageError("No SVG files specified")
    return settings

def main(argv: Optional[list[str]] = None) -> int:
    args = sys.argv[1:] if argv is None else argv

    if len(args) == 0:
        print(USAGE)
        return 0

    try:
        settings = parse_arguments(args)
    except UsageError as e:
        print(f"Error: {e}")
        return 2

    configure_logging(settings['verbose'])

    svg_files = settings['files']
    output_dir = settings['output']
    success_count = 0
    for svg_file in svg_files:
        output_path = None
        if output_dir:
            if os.path.isdir(output_dir):
                base_name = os.path.splitext(os.path.basename(svg_file))[0]
                output_path = os.path.join(output_dir, f"{base_name}.png")
            elif len(svg_files) == 1:
                output_path = output_dir
            else:
                print("Warning: -o with multiple files requires a directory, not a file")

        if process_svg_file(svg_file, output_path, settings['options'], settings['verbose'],
                            settings['skip_render'], settings['debug']):
            success_count += 1

    print(f"\nProcessed {success_count}/{len(svg_files)} file(s) successfully")
    return 0 if success_count == len(svg_files) else 1

if __name__ == "__main__":
    sys.exit(main())
