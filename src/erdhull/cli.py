"""
Command-line interface for erd-hull.

Draws smoothed concave hulls around entity groups of an SVG diagram.
"""

import argparse
import sys
from dataclasses import replace

from erdhull.config import CURVE_TYPES, load_config, save_default_config
from erdhull.tracer import configure_tracer, get_tracer


EXAMPLES = """
examples:
  erd-hull run ImpactContributor
  erd-hull run ImpactContributor --curve-type cardinal --curve-tension 0.8
  erd-hull run ObjectivesDesigner --output text --verbose
  erd-hull run "Treasury*" --padding 12 > treasury.svg
  erd-hull run --focus-areas focus-areas.yaml --svg ERD.svg > ERD-areas.svg
  erd-hull run Treasury Governance --focus-areas focus-areas.yaml --png areas.png

curve types:
  linear       - straight segments (no smoothing)
  catmull-rom  - smooth, passes through all points (--curve-alpha)
  cardinal     - smooth, adjustable tightness (--curve-tension)
  basis        - very smooth B-spline, open, may not touch the points
  basis-closed - closed B-spline

output formats:
  svg  - the diagram with hull overlays (fragments only with --fragments-only)
  json - hull points, area and perimeter per group
  text - human-readable summary
"""


def main(argv=None):
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        prog="erd-hull",
        description="Calculate smooth spline hulls around entity groups in SVG diagrams",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=EXAMPLES,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Run command
    run_parser = subparsers.add_parser(
        "run",
        help="Draw hulls around entity groups or focus areas",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=EXAMPLES,
    )
    run_parser.add_argument(
        "names",
        nargs="*",
        help="Entity group names or wildcard patterns; focus area names with --focus-areas",
    )
    run_parser.add_argument("--svg", "-s", default="ERD.svg", help="SVG file path")
    run_parser.add_argument("--focus-areas", "-f", default=None, help="Focus areas YAML file")
    run_parser.add_argument("--config", "-c", default=None, help="Path to YAML configuration file")
    run_parser.add_argument("--concavity", type=float, default=None, help="Concavity (lower = more concave)")
    run_parser.add_argument("--length-threshold", "-l", type=float, default=None, help="Edge length threshold")
    run_parser.add_argument("--padding", "-p", type=float, default=None, help="Padding around each hull")
    run_parser.add_argument(
        "--curve-type",
        default=None,
        help=f"Curve type: {', '.join(CURVE_TYPES)}",
    )
    run_parser.add_argument("--curve-tension", type=float, default=None, help="Tension for cardinal curves (0.0-1.0)")
    run_parser.add_argument("--curve-alpha", type=float, default=None, help="Alpha for Catmull-Rom curves (0.0-1.0)")
    run_parser.add_argument("--layers", type=int, default=None, help="Number of watercolor layers")
    run_parser.add_argument("--group-attribute", default=None, help="Attribute that names entity groups")
    run_parser.add_argument("--output", "-o", default=None, help="Output format: svg, json, text")
    run_parser.add_argument(
        "--fragments-only",
        action="store_true",
        help="Emit only the generated markup instead of the full diagram",
    )
    run_parser.add_argument(
        "--avoid-label-collisions",
        action="store_true",
        help="Move labels that would overlap each other",
    )
    run_parser.add_argument("--png", default=None, help="Also render the SVG output to this PNG file")
    run_parser.add_argument("--verbose", "-v", action="store_true", help="Verbose output")
    run_parser.add_argument(
        "--trace-level",
        default="INFO",
        choices=["ERROR", "WARN", "INFO", "DEBUG"],
        help="Trace log level (with --verbose)",
    )
    run_parser.add_argument("--trace-file", default=None, help="Path to write trace logs")
    run_parser.add_argument("--trace-json", action="store_true", help="Enable JSON trace output")

    # List focus areas
    list_parser = subparsers.add_parser("list-areas", help="List focus area names")
    list_parser.add_argument("--focus-areas", "-f", required=True, help="Focus areas YAML file")

    # Init config command
    init_parser = subparsers.add_parser("init-config", help="Create default config file")
    init_parser.add_argument(
        "--out", "-o",
        default="erdhull_config.yaml",
        help="Output path for config file",
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    if args.command == "run":
        return handle_run(args)
    elif args.command == "list-areas":
        return handle_list_areas(args)
    elif args.command == "init-config":
        return handle_init_config(args)

    return 0


def apply_overrides(config, args):
    """Command-line options take precedence over the config file."""
    if args.concavity is not None:
        config.hull.concavity = args.concavity
    if args.length_threshold is not None:
        config.hull.length_threshold = args.length_threshold
    if args.padding is not None:
        config.hull.padding = args.padding
    if args.curve_type is not None:
        config.spline.type = args.curve_type
    if args.curve_tension is not None:
        config.spline.tension = args.curve_tension
    if args.curve_alpha is not None:
        config.spline.alpha = args.curve_alpha
    if args.group_attribute is not None:
        config.parser.group_attribute = args.group_attribute
    if args.output is not None:
        config.output.format = args.output
    if args.fragments_only:
        config.output.fragments_only = True

    style_updates = {}
    if args.layers is not None:
        style_updates["layer_count"] = args.layers
    if args.avoid_label_collisions:
        style_updates["avoid_label_collisions"] = True
    if style_updates:
        config.style = replace(config.style, **style_updates)

    return config


def handle_run(args):
    """Handle the run command."""
    configure_tracer(
        enabled=args.verbose,
        level=args.trace_level,
        file_path=args.trace_file,
        json_output=args.trace_json,
    )

    tracer = get_tracer()

    try:
        from erdhull.pipeline import run_pipeline

        config = apply_overrides(load_config(args.config), args)

        if args.png and (config.output.format != "svg" or config.output.fragments_only):
            raise ValueError("--png needs full SVG output (no --fragments-only, --output svg)")

        with tracer.span("cli_run", module="cli"):
            output, results = run_pipeline(
                svg_path=args.svg,
                names=args.names,
                focus_areas_path=args.focus_areas,
                config=config,
                verbose=args.verbose,
            )

            if args.png:
                from erdhull.export.report import render_png
                render_png(output, args.png)

        print(output)
        return 0

    except Exception as e:
        tracer.event(f"Run failed: {str(e)}", level="ERROR")
        print(f"Error: {str(e)}", file=sys.stderr)
        return 1

    finally:
        tracer.config.close()


def handle_list_areas(args):
    """Handle the list-areas command."""
    from erdhull.io.focus_areas import list_names, load_focus_areas

    try:
        focus_areas = load_focus_areas(args.focus_areas)
    except Exception as e:
        print(f"Error: {str(e)}", file=sys.stderr)
        return 1

    for name in list_names(focus_areas):
        print(name)
    return 0


def handle_init_config(args):
    """Handle the init-config command."""
    save_default_config(args.out)
    print(f"Default configuration saved to: {args.out}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
