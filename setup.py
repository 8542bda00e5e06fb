import os.path
import re

from setuptools import setup, find_packages


def read(fname):
    content = None
    with open(os.path.join(os.path.dirname(__file__), fname), 'r') as f:
        content = f.read()
    return content

version = re.search(r"^__version__\s*=\s*'([^']+)'",
    read(os.path.join('podtrack', '__init__.py')), re.M).group(1)

setup(
    name='podtrack',
    version=version,
    author="Scott Torborg",
    author_email="storborg@mit.edu",
    license="GPL",
    keywords="track packages fedex usps shipping proof of delivery",
    url="http://github.com/aheadley/packagetrack",
    description='Identify, track and get proof of delivery for packages.',
    packages=find_packages(exclude=['ez_setup', 'tests']),
    long_description=read('README.rst'),
    python_requires='>=3.8',
    install_requires=[
        'requests',
        'pytz',
    ],
    extras_require={
        'test': ['pytest'],
    },
    zip_safe=False,
    classifiers=[
        "Development Status :: 3 - Alpha",
        "License :: OSI Approved :: GNU General Public License (GPL)",
        "Intended Audience :: Developers",
        "Natural Language :: English",
        "Programming Language :: Python :: 3"
    ]
)
