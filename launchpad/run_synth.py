# launchpad/run_synth.py
"""Synthesize the deployment topology into a CloudFormation template."""

import argparse
import logging
import sys

from launchpad.core.errors import TopologyError
from launchpad.topology import StackConfig, build_topology, synthesize, write_template
from launchpad.topology.synth import FORMATS

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger(__name__)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--outdir", default="synth.out", help="Output directory")
    parser.add_argument("--format", choices=FORMATS, default="json", dest="fmt")
    return parser.parse_args(argv)


def main(argv=None):
    """Main entry point."""
    args = parse_args(argv)
    config = StackConfig()

    logger.info(f"🏗️  Building topology {config.stack_id} ({config.region})")

    try:
        topology = build_topology(config)
        topology.validate()
    except TopologyError as e:
        logger.error(f"❌ Invalid topology: {e}")
        sys.exit(1)

    for resource in topology.topological_order():
        logger.info(f"  {resource.logical_id} ({type(resource).__name__})")

    template = synthesize(topology)
    path = write_template(template, args.outdir, config.stack_id, args.fmt)

    logger.info(f"✅ Wrote {len(template.resources)} resources to {path}")
    return path


if __name__ == "__main__":
    main()
