"""
Main entry point for the survey analysis service.

Runs the HTTP server, or a one-shot PCA or word cloud over a local file.
"""

import argparse
import logging
import os
import sys
import json
from typing import List, Optional

from surveymath.system import SystemManager
from surveymath.components.config import ConfigManager, load_file
from surveymath.survey.analysis import analyze_responses
from surveymath.wordcloud import build_word_cloud


def setup_logging(level: str = 'INFO') -> None:
    """
    Set up logging.

    Args:
        level: Logging level
    """
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler()
        ]
    )


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse command line arguments.

    Returns:
        Parsed arguments
    """
    parser = argparse.ArgumentParser(description='Survey analysis service')

    parser.add_argument(
        '--config',
        help='Path to configuration file'
    )

    parser.add_argument(
        '--log-level',
        default=os.environ.get('LOG_LEVEL', 'INFO').upper(),
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
        help='Logging level'
    )

    subparsers = parser.add_subparsers(dest='command')

    serve = subparsers.add_parser('serve', help='Run the HTTP server (default)')
    serve.add_argument('--port', type=int, help='Server port')
    serve.add_argument('--host', help='Server host')
    serve.add_argument('--database-url', help='Database URL')

    pca = subparsers.add_parser('pca', help='Run PCA over a JSON/YAML list of form responses')
    pca.add_argument('file', help='Path to responses file')
    pca.add_argument('--seed', type=int, help='Seed for the power iteration')

    wordcloud = subparsers.add_parser('wordcloud', help='Build a word cloud from a JSON/YAML list of logs')
    wordcloud.add_argument('file', help='Path to logs file')
    wordcloud.add_argument('--min-frequency', type=int, help='Minimum keyword frequency')
    wordcloud.add_argument('--max-words', type=int, help='Maximum number of words')
    wordcloud.add_argument('--source', choices=['keywords', 'messages'], default='keywords',
                           help='Use extracted keywords or tokenized user messages')

    return parser.parse_args(argv)


def run_pca(args: argparse.Namespace, config) -> None:
    rows = load_file(args.file)
    seed = args.seed if args.seed is not None else config.get('pca.seed')

    result = analyze_responses(
        rows,
        seed=seed,
        iters=config.get('pca.iters', 100),
        min_samples=config.get('pca.min-samples', 3)
    )
    json.dump(result, sys.stdout, ensure_ascii=False, indent=2)
    sys.stdout.write('\n')


def run_wordcloud(args: argparse.Namespace, config) -> None:
    logs = load_file(args.file)
    min_frequency = args.min_frequency or config.get('wordcloud.min-frequency', 2)
    max_words = args.max_words or config.get('wordcloud.max-words', 50)

    result = build_word_cloud(logs, min_frequency, max_words, args.source)
    json.dump(result, sys.stdout, ensure_ascii=False, indent=2, default=str)
    sys.stdout.write('\n')


def serve(args: argparse.Namespace, config) -> None:
    system = SystemManager.start(config)

    try:
        system.wait_for_shutdown()
    except KeyboardInterrupt:
        pass
    finally:
        SystemManager.stop()


def main(argv: Optional[List[str]] = None) -> None:
    """
    Main entry point.
    """
    args = parse_args(argv)

    setup_logging(args.log_level)

    overrides = {}

    if args.config:
        overrides.update(load_file(args.config))

    if getattr(args, 'port', None):
        overrides.setdefault('server', {})['port'] = args.port

    if getattr(args, 'host', None):
        overrides.setdefault('server', {})['host'] = args.host

    if getattr(args, 'database_url', None):
        overrides.setdefault('database', {})['url'] = args.database_url

    config = ConfigManager.get_config(overrides)

    if args.command == 'pca':
        run_pca(args, config)
    elif args.command == 'wordcloud':
        run_wordcloud(args, config)
    else:
        serve(args, config)


if __name__ == '__main__':
    main()
