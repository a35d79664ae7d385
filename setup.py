import sys
from setuptools import setup, find_packages


if sys.version_info < (3, 8):
    sys.stderr.write(
        f'You are using Python '
        + f"{'.'.join(str(v) for v in sys.version_info[:3])}.\n\n"
        + 'tvdenoise only supports Python 3.8 and above.\n\n'
        + 'Please install Python 3.8 or above.\n\n'
    )
    sys.exit(1)

with open('requirements.txt') as f:
    required = f.read().splitlines()

setup(
    name='tvdenoise',
    version='0.0.1',
    install_requires=required,
    extras_require={'test': ['pytest']},
    packages=find_packages(),
)
