"""
CLI - command line interface for image operations
"""

import argparse
import json
import logging
import sys
from typing import List, Optional

from .client import DockerClient
from .exceptions import DockerException
from .query import BuildParamsBuilder, ListImagesFilterBuilder, SearchImagesFilterBuilder
from .settings import Settings

logger = logging.getLogger(__name__)

ACTIONS = [
    'images', 'inspect', 'history', 'rm', 'tag',
    'search', 'build', 'push', 'save', 'load',
]


def _split_pair(text: str, option: str):
    if '=' not in text:
        raise ValueError(f"{option} expects KEY=VALUE, got {text!r}")
    key, value = text.split('=', 1)
    return key, value


def _format_size(size: int) -> str:
    for unit in ('B', 'kB', 'MB', 'GB'):
        if size < 1000:
            return f"{size:.0f}{unit}" if unit == 'B' else f"{size:.1f}{unit}"
        size /= 1000
    return f"{size:.1f}TB"


class ImagesCLI:
    """Image commands of the CLI"""

    def __init__(self, client: DockerClient):
        self.client = client

    def list_images(self, filters: List[str]):
        """List images"""
        builder = ListImagesFilterBuilder()
        grouped = {}
        for item in filters:
            key, value = _split_pair(item, '--filter')
            grouped.setdefault(key, []).append(value)
        for key, values in grouped.items():
            builder.set(key, *values)

        images = self.client.images.list(filters=builder.build())

        print(f"{'REPOSITORY:TAG':<50} {'IMAGE ID':<15} {'SIZE':<10}")
        for image in images:
            tags = image.repo_tags or ['<none>:<none>']
            for tag in tags:
                print(f"{tag:<50} {image.short_id:<15} {_format_size(image.size):<10}")

        print(f"\nTotal: {len(images)}")

    def inspect(self, name: str):
        """Print image details as JSON"""
        details = self.client.images.get(name)
        print(details.model_dump_json(by_alias=True, indent=2))

    def history(self, name: str):
        """Print image history"""
        print(f"{'IMAGE':<15} {'SIZE':<10} {'CREATED BY'}")
        for entry in self.client.images.history(name):
            short_id = entry.id.split(':', 1)[-1][:12] if entry.id != '<missing>' else entry.id
            print(f"{short_id:<15} {_format_size(entry.size):<10} {entry.created_by[:60]}")

    def remove(self, name: str, force: bool = False, noprune: bool = False):
        """Remove image"""
        for info in self.client.images.remove(name, force=force, noprune=noprune):
            if info.untagged:
                print(f"Untagged: {info.untagged}")
            if info.deleted:
                print(f"Deleted: {info.deleted}")

    def tag(self, name: str, repo: Optional[str], tag: Optional[str]):
        """Tag image"""
        self.client.images.tag(name, repo=repo, tag=tag)
        print(f"Tagged {name} as {repo or ''}:{tag or 'latest'}")

    def search(self, term: str, limit: Optional[int], official: bool,
               automated: bool, stars: Optional[int]):
        """Search Docker Hub"""
        builder = SearchImagesFilterBuilder()
        if official:
            builder.is_official(True)
        if automated:
            builder.is_automated(True)
        if stars is not None:
            builder.minimum_stars(stars)

        results = self.client.images.search(term, limit=limit, filters=builder.build())

        print(f"{'NAME':<40} {'STARS':<7} {'OFFICIAL':<9} {'DESCRIPTION'}")
        for result in results:
            official_mark = '[OK]' if result.is_official else ''
            print(f"{result.name:<40} {result.star_count:<7} {official_mark:<9} {result.description[:50]}")

    def build(self, path: str, tag: Optional[str], dockerfile: Optional[str],
              build_args: List[str], labels: List[str], no_cache: bool, pull: bool):
        """Build image"""
        builder = BuildParamsBuilder()
        if dockerfile:
            builder.dockerfile(dockerfile)
        if tag:
            builder.tag(tag)
        if no_cache:
            builder.no_cache(True)
        if pull:
            builder.pull(True)
        if build_args:
            builder.build_args(dict(_split_pair(item, '--build-arg') for item in build_args))
        if labels:
            builder.labels(dict(_split_pair(item, '--label') for item in labels))

        log = self.client.images.build(path, params=builder.build())
        for line in log.splitlines():
            try:
                data = json.loads(line)
            except ValueError:
                data = line
            message = data.get('stream', '') if isinstance(data, dict) else str(data)
            if message.strip():
                print(message.rstrip())

    def push(self, name: str, registry: str, tag: Optional[str]):
        """Push image"""
        print(self.client.images.push(name, registry, tag=tag))

    def save(self, name: str, output: str):
        """Export image to a tarball"""
        self.client.images.export(name, output)
        print(f"Saved {name} to {output}")

    def load(self, path: str):
        """Load images from a tarball"""
        print(self.client.images.load(path))


def run_cli(argv: Optional[List[str]] = None) -> int:
    """Start CLI application"""
    parser = argparse.ArgumentParser(
        prog='unixdock',
        description='unixdock - Docker image management over a Unix socket',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Usage examples:
  %(prog)s images --filter dangling=true
  %(prog)s inspect alpine:latest
  %(prog)s rm alpine:latest --force
  %(prog)s tag alpine:latest --repo myuser/alpine --tag v1
  %(prog)s build ./context -t myimage:latest --build-arg VERSION=1
  %(prog)s search nginx --limit 5 --official
"""
    )

    parser.add_argument('action', choices=ACTIONS, help='Action')
    parser.add_argument('name', nargs='?', help='Image name, build context, search term or tarball')

    # Connection parameters
    parser.add_argument('--socket', help='Docker socket path')
    parser.add_argument('--log-level', help='Log level (default: from settings)')

    # Listing and search parameters
    parser.add_argument('--filter', action='append', default=[], help='Filter KEY=VALUE')
    parser.add_argument('--limit', type=int, help='Maximum number of search results')
    parser.add_argument('--official', action='store_true', help='Only official images')
    parser.add_argument('--automated', action='store_true', help='Only automated builds')
    parser.add_argument('--stars', type=int, help='Minimum star count')

    # Image parameters
    parser.add_argument('--force', action='store_true', help='Force removal')
    parser.add_argument('--no-prune', action='store_true', help="Don't delete untagged parents")
    parser.add_argument('--repo', help='Target repository')
    parser.add_argument('--tag', '-t', help='Image tag')
    parser.add_argument('--registry', help='Registry address for push')
    parser.add_argument('--output', '-o', help='Output file for save')

    # Build parameters
    parser.add_argument('--file', '-f', dest='dockerfile', help='Dockerfile path in context')
    parser.add_argument('--build-arg', action='append', default=[], help='Build argument KEY=VALUE')
    parser.add_argument('--label', action='append', default=[], help='Image label KEY=VALUE')
    parser.add_argument('--no-cache', action='store_true', help='Do not use cache')
    parser.add_argument('--pull', action='store_true', help='Always pull base images')

    args = parser.parse_args(argv)

    settings = Settings()
    level = (args.log_level or settings.get('log_level') or 'WARNING').upper()
    logging.basicConfig(level=getattr(logging, level, logging.WARNING), format='%(message)s')

    if args.action not in ('images',) and not args.name:
        parser.error(f"{args.action} requires a NAME argument")
    if args.action == 'images' and args.name:
        parser.error(f"images takes no NAME argument, got {args.name!r}")
    if args.action == 'push' and not args.registry:
        parser.error("push requires --registry")
    if args.action == 'save' and not args.output:
        parser.error("save requires --output")

    cli = ImagesCLI(DockerClient(socket_path=args.socket, settings=settings))

    try:
        if args.action == 'images':
            cli.list_images(args.filter)

        elif args.action == 'inspect':
            cli.inspect(args.name)

        elif args.action == 'history':
            cli.history(args.name)

        elif args.action == 'rm':
            cli.remove(args.name, force=args.force, noprune=args.no_prune)

        elif args.action == 'tag':
            cli.tag(args.name, repo=args.repo, tag=args.tag)

        elif args.action == 'search':
            cli.search(args.name, limit=args.limit, official=args.official,
                       automated=args.automated, stars=args.stars)

        elif args.action == 'build':
            cli.build(args.name, tag=args.tag, dockerfile=args.dockerfile,
                      build_args=args.build_arg, labels=args.label,
                      no_cache=args.no_cache, pull=args.pull)

        elif args.action == 'push':
            cli.push(args.name, args.registry, tag=args.tag)

        elif args.action == 'save':
            cli.save(args.name, args.output)

        elif args.action == 'load':
            cli.load(args.name)

    except (DockerException, ValueError, OSError) as e:
        logger.error(f"Error: {e}")
        return 1

    return 0


def main():
    sys.exit(run_cli())
