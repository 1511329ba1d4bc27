__version__ = "0.1.0"

import argparse
import logging
import os

from discrete_feedback.feedback import stellar_feedback


def parse_cli_args():
    parser = argparse.ArgumentParser(
        description="Build and inspect the discrete stellar feedback tables."
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Log progress at debug level."
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    build = subparsers.add_parser("build", help="Build the tables and write a restart file.")
    build.add_argument(
        "-o", "--output-path", type=str, default="./", help="Desired path to output restart file."
    )
    build.add_argument(
        "-n", "--name", type=str, default="feedback_restart.bin", help="Restart file name."
    )
    build.set_defaults(func=run_build)

    inspect = subparsers.add_parser("inspect", help="Summarise an existing restart file.")
    inspect.add_argument("restart_file", type=str, help="Path to a restart file.")
    inspect.add_argument(
        "-o", "--output-csv", type=str, default=None, help="Write the summary to a csv."
    )
    inspect.set_defaults(func=run_inspect)

    return parser


def run_build(args):
    """Build the feedback tables from config and dump them."""
    output_file = os.path.join(args.output_path, args.name)
    fb = stellar_feedback.DiscreteStellarFeedback.build()
    fb.save(output_file)
    print(f"Wrote feedback tables to {output_file}")


def run_inspect(args):
    """Restore the feedback tables and print the derived quantities."""
    fb = stellar_feedback.DiscreteStellarFeedback.load(args.restart_file)
    summary = fb.summary()
    if args.output_csv is not None:
        summary.to_csv(args.output_csv, index=False)
    else:
        print(summary.to_string(index=False))


def main(argv=None):
    args = parse_cli_args().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )
    args.func(args)
