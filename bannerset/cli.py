"""
Command Line Interface for banner set thumbnails.
"""

import argparse
import logging
from typing import List, Optional

import urllib3

from .asset_fetcher import AssetFetcher, sibling_key
from .config import MosaicConfig
from .errors import BannerSetError, InvalidMetadata
from .local_client import LocalClient, LocalConfig
from .metadata import BannerSetMetadata
from .mosaic_composer import MosaicComposer
from .processor import BannerSetProcessor
from .s3_client import S3Client
from .s3_config import S3Config
from .scratch import ScratchArena
from .size_catalog import SizeCatalog
from .thumbnail_downscaler import ThumbnailDownscaler


def setup_logging(verbose: bool) -> logging.Logger:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO

    logging.basicConfig(
        level=level,
        format='%(asctime)s [%(levelname)s] %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    logging.getLogger('boto3').setLevel(logging.WARNING)
    logging.getLogger('botocore').setLevel(logging.WARNING)
    logging.getLogger('urllib3').setLevel(logging.WARNING)

    return logging.getLogger('bannerset')


def get_s3_config(args: argparse.Namespace) -> S3Config:
    """Get S3 configuration from environment and CLI overrides."""
    config = S3Config.from_env()

    if getattr(args, 's3_endpoint', None):
        config.endpoint = args.s3_endpoint
    if getattr(args, 's3_access_key', None):
        config.access_key = args.s3_access_key
    if getattr(args, 's3_secret_key', None):
        config.secret_key = args.s3_secret_key
    if getattr(args, 's3_region', None):
        config.region = args.s3_region

    return config


def get_mosaic_config(args: argparse.Namespace) -> MosaicConfig:
    """Get composer configuration from environment and CLI overrides."""
    config = MosaicConfig.from_env()

    if getattr(args, 'workers', None):
        config.max_workers = args.workers
    if getattr(args, 'scratch_dir', None):
        config.scratch_dir = args.scratch_dir
    if getattr(args, 'width', None):
        config.thumbnail_width = args.width

    return config


def get_storage_client(args: argparse.Namespace, logger: logging.Logger):
    """
    Get appropriate storage client based on arguments.

    Returns:
        LocalClient when --local-root is given, otherwise S3Client
    """
    local_root = getattr(args, 'local_root', None)

    if local_root:
        config = LocalConfig(root_path=local_root)
        errors = config.validate()
        if errors:
            for error in errors:
                logger.error(error)
            raise ValueError("Local configuration invalid")
        logger.info(f"Storage: Local filesystem ({config.root_path})")
        return LocalClient(config, logger)

    config = get_s3_config(args)
    errors = config.validate()
    if errors:
        for error in errors:
            logger.error(error)
        raise ValueError("S3 configuration invalid")
    logger.info(f"Storage: S3 ({config.endpoint or 'default endpoint'})")
    return S3Client(config, logger)


def build_processor(
    client,
    config: MosaicConfig,
    logger: logging.Logger
) -> BannerSetProcessor:
    """Wire up the composer and downscaler around a storage client."""
    composer = MosaicComposer(
        fetcher=AssetFetcher(client, logger),
        max_workers=config.max_workers,
        scratch_dir=config.scratch_dir,
        logger=logger,
    )
    return BannerSetProcessor(
        storage_client=client,
        composer=composer,
        downscaler=ThumbnailDownscaler(config.thumbnail_width, logger=logger),
        logger=logger,
    )


def _prepare(args: argparse.Namespace, logger: logging.Logger) -> Optional[MosaicConfig]:
    """Load and validate mosaic config, sweeping stale scratch arenas."""
    config = get_mosaic_config(args)
    errors = config.validate()
    if errors:
        for error in errors:
            logger.error(error)
        return None
    if config.scratch_dir:
        ScratchArena.sweep(config.scratch_dir, config.scratch_max_age, logger)
    return config


def add_storage_arguments(parser: argparse.ArgumentParser) -> None:
    """Add storage configuration arguments to a parser."""
    local_group = parser.add_argument_group('Local Storage')
    local_group.add_argument('--local-root', metavar='PATH',
                             help='Use local filesystem instead of S3 (<root>/<bucket>/<key>)')

    s3_group = parser.add_argument_group('S3 Storage')
    s3_group.add_argument('--s3-endpoint', help='Override S3_ENDPOINT')
    s3_group.add_argument('--s3-access-key', help='Override S3_ACCESS_KEY')
    s3_group.add_argument('--s3-secret-key', help='Override S3_SECRET_KEY')
    s3_group.add_argument('--s3-region', help='Override S3_REGION')


def add_mosaic_arguments(parser: argparse.ArgumentParser) -> None:
    """Add composer configuration arguments to a parser."""
    group = parser.add_argument_group('Mosaic')
    group.add_argument('-w', '--workers', type=int, help='Override BANNERSET_MAX_WORKERS')
    group.add_argument('--scratch-dir', metavar='PATH', help='Override BANNERSET_SCRATCH_DIR')
    group.add_argument('--width', type=int, help='Override BANNERSET_THUMBNAIL_WIDTH')


def cmd_process(args: argparse.Namespace) -> int:
    """Execute process command: stored banner -> stored thumbnail."""
    logger = setup_logging(args.verbose)
    urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)

    config = _prepare(args, logger)
    if config is None:
        return 1
    try:
        client = get_storage_client(args, logger)
    except ValueError:
        return 1

    try:
        processor = build_processor(client, config, logger)
        thumb_key = processor.process_object(args.bucket, args.key, args.prefix)
        if not args.quiet:
            print(thumb_key)
        return 0

    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except BannerSetError as e:
        logger.error(f"Processing failed: {e}")
        return 1
    except Exception as e:
        logger.exception(f"Processing failed: {e}")
        return 1


def cmd_compose(args: argparse.Namespace) -> int:
    """Execute compose command: banner set -> local PNG file."""
    logger = setup_logging(args.verbose)
    urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)

    config = _prepare(args, logger)
    if config is None:
        return 1
    try:
        client = get_storage_client(args, logger)
    except ValueError:
        return 1

    try:
        raw = {}
        if args.sizes:
            raw['sizes'] = args.sizes
        if args.valid_size:
            raw['validsize'] = args.valid_size
        metadata = BannerSetMetadata.from_mapping(raw)

        if args.key:
            base_key = args.key
        elif metadata.valid_size is not None:
            base_key = sibling_key(args.prefix, metadata.valid_size)
        else:
            raise InvalidMetadata("--key is required without --valid-size")
        base_data = client.download_object(args.bucket, base_key)

        processor = build_processor(client, config, logger)
        if args.full:
            mosaic = processor.composer.compose(base_data, args.bucket, args.prefix, metadata)
            if mosaic is None:
                raise InvalidMetadata("--full requires --sizes")
            output = mosaic.data
        else:
            output = processor.process_image(base_data, args.bucket, args.prefix, metadata)

        with open(args.output, 'wb') as f:
            f.write(output)
        logger.info(f"Wrote {args.output} ({len(output)} bytes)")
        return 0

    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except BannerSetError as e:
        logger.error(f"Compose failed: {e}")
        return 1
    except Exception as e:
        logger.exception(f"Compose failed: {e}")
        return 1


def cmd_sweep(args: argparse.Namespace) -> int:
    """Execute sweep command: remove orphaned scratch arenas."""
    logger = setup_logging(args.verbose)
    config = get_mosaic_config(args)
    if not config.scratch_dir:
        logger.error("No scratch directory configured (use --scratch-dir or BANNERSET_SCRATCH_DIR)")
        return 1

    max_age = args.max_age if args.max_age is not None else config.scratch_max_age
    removed = ScratchArena.sweep(config.scratch_dir, max_age, logger)
    print(f"Removed {removed} stale arena(s)")
    return 0


def cmd_sizes(args: argparse.Namespace) -> int:
    """Execute sizes command: print the canonical size table."""
    catalog = SizeCatalog()
    print(f"Canvas: {catalog.canvas_width}x{catalog.canvas_height}")
    print(f"{'key':<16} {'size':>8}  {'position':>10}")
    for key in catalog.keys():
        spec = catalog.lookup(key)
        size = f"{spec.target_width}x{spec.target_height}"
        position = f"({spec.inset_left},{spec.inset_top})"
        print(f"{key.value:<16} {size:>8}  {position:>10}")
    return 0


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog='bannerset',
        description='Banner set mosaic thumbnails',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m bannerset process --bucket banners --key abc-halfPage-bannerset
  python -m bannerset compose --local-root ./store --bucket banners --prefix abc \\
      --sizes halfPage,leaderboard --valid-size halfPage -o preview.png
  python -m bannerset sizes

Storage options:
  Use --local-root for local filesystem, or S3 environment variables for S3.
"""
    )

    parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose logging')

    subparsers = parser.add_subparsers(dest='command', help='Command to run')

    # Process command
    process_parser = subparsers.add_parser('process', help='Build and upload the thumbnail for a stored banner')
    process_parser.add_argument('-b', '--bucket', required=True, help='Bucket (or local container)')
    process_parser.add_argument('-k', '--key', required=True, help='Key of the uploaded banner')
    process_parser.add_argument('-p', '--prefix', help='Sibling key prefix (default: derived from key)')
    process_parser.add_argument('-q', '--quiet', action='store_true', help='Do not print the thumbnail key')
    process_parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose logging')
    add_storage_arguments(process_parser)
    add_mosaic_arguments(process_parser)

    # Compose command
    compose_parser = subparsers.add_parser('compose', help='Compose a banner set into a local PNG')
    compose_parser.add_argument('-b', '--bucket', required=True, help='Bucket (or local container)')
    compose_parser.add_argument('-p', '--prefix', required=True, help='Sibling key prefix')
    compose_parser.add_argument('--sizes', help='Comma-separated sizes present in the set')
    compose_parser.add_argument('--valid-size', help='Size of the base banner')
    compose_parser.add_argument('-k', '--key', help='Base banner key (default: <prefix>-<valid-size>)')
    compose_parser.add_argument('-o', '--output', default='thumbnail.png', help='Output PNG file')
    compose_parser.add_argument('--full', action='store_true', help='Write the full 960x884 mosaic')
    compose_parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose logging')
    add_storage_arguments(compose_parser)
    add_mosaic_arguments(compose_parser)

    # Sweep command
    sweep_parser = subparsers.add_parser('sweep', help='Remove stale scratch arenas')
    sweep_parser.add_argument('--scratch-dir', metavar='PATH', help='Override BANNERSET_SCRATCH_DIR')
    sweep_parser.add_argument('--max-age', type=float, help='Age in seconds (default: BANNERSET_SCRATCH_MAX_AGE)')
    sweep_parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose logging')

    # Sizes command
    subparsers.add_parser('sizes', help='Print the canonical banner sizes')

    return parser


def main(args: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    if not parsed_args.command:
        parser.print_help()
        return 1

    if parsed_args.command == 'process':
        return cmd_process(parsed_args)
    elif parsed_args.command == 'compose':
        return cmd_compose(parsed_args)
    elif parsed_args.command == 'sweep':
        return cmd_sweep(parsed_args)
    elif parsed_args.command == 'sizes':
        return cmd_sizes(parsed_args)

    return 1
