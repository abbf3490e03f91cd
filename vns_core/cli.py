"""VNS CLI: set and get signed name records from the command line."""

import sys

import click

from vns_core import __version__
from vns_core.config import load_config
from vns_core.errors import RecordStoreError
from vns_core.fetch import FetchError
from vns_core.logger import get_logger
from vns_core.store import RecordStore
from vns_core.utils import hexd

REQUEST_GET = "name-record-get"
REQUEST_SET = "name-record-set"


def check_given_options(request_type: str, ipfs_link: str, sig: str) -> None:
    if request_type == REQUEST_GET and (ipfs_link or sig):
        raise click.UsageError(f"use --ipfs-link and --sig only if request type is {REQUEST_SET}")
    if request_type == REQUEST_SET and not (ipfs_link and sig):
        raise click.UsageError(f"{REQUEST_SET} requires --ipfs-link and --sig")


@click.command()
@click.version_option(version=__version__)
@click.option("--request-type", required=True, type=click.Choice([REQUEST_GET, REQUEST_SET]), help="request type")
@click.option("--uid", required=True, help="<username>:<hex pubkey>")
@click.option("--ipfs-link", default="", help="IPFS link (set only)")
@click.option("--sig", default="", help="hex-encoded signature over the link (set only)")
@click.option("--storage", default=None, help="Record table path [VNS_STORAGE_PATH]")
@click.option("--fetch/--no-fetch", default=False, help="Resolve the link content after get")
@click.option("--gateway", default=None, help="IPFS HTTP gateway URL [VNS_GATEWAY_URL]")
def main(request_type, uid, ipfs_link, sig, storage, fetch, gateway):
    """Verified name-record store.

    Binds UID (name plus embedded public key) to a content link. Only a
    signature from the matching private key can update the binding.
    """
    check_given_options(request_type, ipfs_link, sig)
    try:
        config = load_config({"storage_path": storage, "gateway_url": gateway})
    except ValueError as e:
        raise click.UsageError(f"invalid configuration: {e}")
    get_logger(level=config.log_level)
    store = RecordStore(config)

    try:
        if request_type == REQUEST_SET:
            try:
                signature = hexd(sig)
            except ValueError as e:
                raise click.BadParameter(str(e), param_hint="--sig")
            store.set(uid, ipfs_link, signature)
            click.echo("result: ok (signature correct)")
            return

        link = store.get(uid)
        click.echo(link)
        if fetch:
            out = click.get_binary_stream("stdout")
            for chunk in store.fetcher.stream(link):
                out.write(chunk)
            out.flush()
    except (RecordStoreError, FetchError) as e:
        click.echo(f"error: {e}", err=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
