"""CLI entrypoint for the graph mapper."""
from __future__ import annotations

import argparse
import logging
import random
import sys
from pathlib import Path
from typing import Dict, List, Optional

from core.config import Settings
from core.configuration import Configuration, load_configuration_file
from core.errors import ConfigurationError
from pipeline.generator import GraphGenerator
from pipeline.loader import GraphLoader
from sources.factory import FORMATS, open_source
from storage.exporters.graph_exporter import export_graph
from storage.memory import MemoryGraphStore

PROVENANCE_KEY = "_p"

logger = logging.getLogger(__name__)


def setup_logging(settings: Settings) -> None:
    cfg = settings.logging
    level_name = str(cfg.get('level', 'INFO')).upper()
    fmt = cfg.get('console_format', '%(levelname)s: %(message)s')
    console_level_name = str(cfg.get('min_log_level_console', level_name)).upper()
    file_level_name = str(cfg.get('min_log_level_file', 'DEBUG')).upper()

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(logging.DEBUG)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(getattr(logging, console_level_name, logging.INFO))
    console_handler.setFormatter(logging.Formatter(fmt))
    root_logger.addHandler(console_handler)

    output_dir = cfg.get('output_dir')
    if output_dir:
        log_dir = Path(output_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        file_fmt = cfg.get('file_format', '%(asctime)s - %(levelname)s - %(name)s - %(message)s')
        file_handler = logging.FileHandler(log_dir / 'graph_mapper.log', encoding='utf-8')
        file_handler.setLevel(getattr(logging, file_level_name, logging.DEBUG))
        file_handler.setFormatter(logging.Formatter(file_fmt))
        root_logger.addHandler(file_handler)

    logging.getLogger('neo4j').setLevel(logging.WARNING)
    logging.getLogger('faker').setLevel(logging.WARNING)


def audit_data(prov: Optional[str]) -> Dict[str, str]:
    if prov is None:
        return {}
    return {PROVENANCE_KEY: prov}


def open_store(kind: str, settings: Settings):
    if kind == 'neo4j':
        # Imported here so the memory store works without a driver configured
        from storage.neo4j.neo4j_utils import Neo4jConnection
        from storage.neo4j.store import Neo4jGraphStore

        cfg = settings.neo4j
        conn = Neo4jConnection(cfg['uri'], cfg['user'], cfg['password'], cfg.get('database'))
        return Neo4jGraphStore(conn)
    return MemoryGraphStore()


def _finish(store, output: Optional[str]) -> None:
    if output:
        if isinstance(store, MemoryGraphStore):
            export_graph(store, output)
        else:
            logger.warning("--output is only used with the memory graph; ignoring %s", output)
    logger.info("Disconnecting from graph")
    store.close()


def _load_configuration(path: str) -> Optional[Configuration]:
    try:
        return load_configuration_file(path)
    except ConfigurationError as exc:
        logger.error("Couldn't load mapping configuration %s: %s", path, exc)
        return None


def run_map(args: argparse.Namespace, settings: Settings) -> int:
    conf = _load_configuration(args.config)
    if conf is None:
        return 1

    try:
        source = open_source(
            args.format, args.data,
            header=args.headers, table=args.table, query=args.query,
            element=args.element, ignore_case=args.ignore_case,
        )
    except ValueError as exc:
        logger.error("Unable to initialise %s data source: %s", args.format, exc)
        return 1

    logger.info("Connecting to graph")
    store = open_store(args.graph, settings)
    loader = GraphLoader(
        conf, store,
        audit_data=audit_data(args.prov),
        flatten=args.flatten,
        log_every=settings.log_every,
    )
    try:
        with source:
            loader.load(source, progress=settings.enable_progress_bar)
    finally:
        _finish(store, args.output)

    logger.info("Finished")
    return 0


def run_generate(args: argparse.Namespace, settings: Settings) -> int:
    conf = _load_configuration(args.config)
    if conf is None:
        return 1

    store = open_store(args.graph, settings)
    generator = GraphGenerator(rng=random.Random(args.seed))
    try:
        logger.info("Generating sample graph")
        generator.generate(store, conf)
    finally:
        _finish(store, args.output)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='graph-mapper', description='Map structured data into a graph')
    parser.add_argument('--settings', help='Settings YAML (logging, neo4j, run options)')
    sub = parser.add_subparsers(dest='command', required=True)

    map_cmd = sub.add_parser('map', help='Map a data source into a graph')
    map_cmd.add_argument('--config', '-c', required=True, help='Mapping configuration file')
    map_cmd.add_argument('--data', '-d', required=True, help='Input file, or SQLite database if format is SQL')
    map_cmd.add_argument('--format', '-f', default='CSV', type=str.upper, choices=FORMATS, help='Input data format')
    map_cmd.add_argument('--headers', action='store_true', help='CSV file has headers')
    map_cmd.add_argument('--table', '-t', help='Table name (SQL)')
    map_cmd.add_argument('--query', '-q', help='SQL query (overrides table), or RegEx pattern')
    map_cmd.add_argument('--element', '-e', help='Element name (XML)')
    map_cmd.add_argument('--ignore-case', '-i', action='store_true', help='Ignore case in regular expressions')
    map_cmd.add_argument('--prov', help='Provenance value to add to all vertices and edges')
    map_cmd.add_argument('--flatten', '-a', action='store_true', help='Flatten nested records')
    map_cmd.add_argument('--graph', '-g', default='memory', choices=['memory', 'neo4j'], help='Output graph')
    map_cmd.add_argument('--output', '-o', help='Export path for the memory graph (.graphml or .json)')
    map_cmd.set_defaults(func=run_map)

    gen_cmd = sub.add_parser('generate', help='Generate a sample graph from a mapping file')
    gen_cmd.add_argument('--config', '-c', required=True, help='Mapping configuration file')
    gen_cmd.add_argument('--graph', '-g', default='memory', choices=['memory', 'neo4j'], help='Output graph')
    gen_cmd.add_argument('--output', '-o', help='Export path for the memory graph (.graphml or .json)')
    gen_cmd.add_argument('--seed', type=int, help='Random seed')
    gen_cmd.set_defaults(func=run_generate)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = Settings(args.settings)
    setup_logging(settings)
    return args.func(args, settings)


if __name__ == '__main__':
    sys.exit(main())
