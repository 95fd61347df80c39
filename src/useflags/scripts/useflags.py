"""save, print and compare the effective USE flags of a system"""

import logging
import os

from snakeoil.cli import arghparse

from .. import const, snapshot
from ..log import logger
from ..portage_env import PortageEnv, Shell, VarReader, detect_backends

argparser = arghparse.ArgumentParser(description=__doc__, script=(__file__, __name__))

portage_opts = argparser.add_argument_group('portage options')
portage_opts.add_argument(
    '--root', default=os.environ.get('ROOT', '/'), metavar='PATH',
    help='installation root',
    docs="""
        Root of the installation whose repositories are queried; passed
        down to the config backends as ROOT.
    """)
portage_opts.add_argument(
    '--config-root', metavar='PATH', type=arghparse.existent_path,
    help='configuration root (defaults to PORTAGE_CONFIGROOT or the root)')
portage_opts.add_argument(
    '--backend', default='auto', choices=('auto',) + const.BACKENDS + ('none',),
    help='tool used to query portage variables',
    docs="""
        Tool used to look up repository locations. By default eix is
        preferred when installed, falling back to portageq. With ``none``
        repositories must be given via --repo.
    """)
portage_opts.add_argument(
    '--repo', dest='repos', action='append', metavar='PATH',
    help='repository to read profiles from (can be given multiple times)')
argparser.add_argument(
    '-f', '--file', default=const.SNAPSHOT_FILE, metavar='PATH',
    help=f'snapshot file (defaults to {const.SNAPSHOT_FILE})')


@argparser.bind_final_check
def _setup_logging(parser, namespace):
    if getattr(namespace, 'debug', False) or getattr(namespace, 'verbosity', 0) > 0:
        logger.setLevel(logging.DEBUG)


def _resolve(options):
    """Return the flag store of the live system."""
    reader = VarReader(detect_backends(options.backend), root=options.root)
    env = PortageEnv(
        reader, Shell(), root=options.root,
        config_root=options.config_root, repos=options.repos)
    return env.resolve()


subparsers = argparser.add_subparsers(description='actions')

save = subparsers.add_parser(
    'save', description='save the current USE flags to the snapshot file')
@save.bind_main_func
def _save(options, out, err):
    snapshot.save(_resolve(options), options.file)
    return 0


print_opts = subparsers.add_parser(
    'print', description='print the current USE flags')
print_opts.add_argument(
    '-b', '--brief', action='store_true',
    help='only show whether flags are on or off')
@print_opts.bind_main_func
def _print(options, out, err):
    for line in snapshot.iter_lines(_resolve(options), brief=options.brief):
        out.write(line)
    return 0


cat = subparsers.add_parser(
    'cat', description='print the USE flags stored in a snapshot file')
cat.add_argument(
    'path', nargs='?', metavar='FILE',
    help='snapshot to show (defaults to the snapshot file)')
cat.add_argument(
    '-b', '--brief', action='store_true',
    help='only show whether flags are on or off')
@cat.bind_main_func
def _cat(options, out, err):
    store = snapshot.load(options.path or options.file)
    for line in snapshot.iter_lines(store, brief=options.brief):
        out.write(line)
    return 0


diff = subparsers.add_parser(
    'diff', description='show USE flags that changed between two snapshots')
diff.add_argument(
    'old', nargs='?', metavar='OLD',
    help='older snapshot (defaults to the snapshot file)')
diff.add_argument(
    'new', nargs='?', metavar='NEW',
    help='newer snapshot (defaults to the current system)')
diff.add_argument(
    '-r', '--reverse', action='store_true',
    help='swap old and new')
@diff.bind_main_func
def _diff(options, out, err):
    old = snapshot.load(options.old or options.file)
    if options.new is not None:
        new = snapshot.load(options.new)
    else:
        new = _resolve(options)
    for line in snapshot.format_diff(snapshot.diff(old, new, reverse=options.reverse)):
        out.write(line)
    return 0
