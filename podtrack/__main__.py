import argparse
import logging

from . import Package, parse_tracking_numbers
from .configuration import ConfigError
from .carriers.errors import TrackingFailure

parser = argparse.ArgumentParser(prog='podtrack',
    description='Identify and track USPS and FedEx packages.')
parser.add_argument('numbers', nargs='+',
    help='tracking numbers, separated by spaces, commas or newlines')
parser.add_argument('--history', action='store_true', help='show scan events')
parser.add_argument('--pod', action='store_true', help='show proof of delivery')
parser.add_argument('-v', '--verbose', action='store_true')
args = parser.parse_args()

logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
    format='%(asctime)s %(levelname)s %(name)s: %(message)s')

for tn in parse_tracking_numbers(' '.join(args.numbers)):
    try:
        pkg = Package(tn)
        print('%s %s %s' % (tn, pkg.carrier, pkg.url))
        print(pkg.status())
        if args.history:
            for event in pkg.history():
                print('  %s' % event)
        if args.pod:
            print(pkg.proof_of_delivery())
    except (ConfigError, TrackingFailure) as err:
        print('ERROR: %s: %s' % (tn, err))
