import os

from setuptools import setup, find_packages

with open(os.path.join(os.path.dirname(__file__), "readme.md"), "r") as fh:
    long_description = fh.read()

setup(
    name='smartcycle-server',
    version='1.0.0',
    license='MIT',
    description='The backend for the SmartCycle campus bicycle sharing system.',
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=("tests", "tests.*")),
    python_requires='>=3.8',
    install_requires=[
        'aiohttp',
        'aiohttp-cors',
        'tortoise-orm>=0.21',
        'marshmallow>=3.13,<4',
        'marshmallow-jsonschema',
        'python-jose',
        'sentry-sdk',
        'uvloop',
        'qrcode',
    ],
    extras_require={
        'test': [
            'pytest',
            'pytest-aiohttp',
            'pytest-asyncio',
            'Faker',
        ],
    },
    entry_points={
        'console_scripts': [
            'smartcycle=smartcycle.cli:run',
            'smartcycle-seed=smartcycle.cli:seed',
        ],
    },
)
