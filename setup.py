# setup.py
from setuptools import setup, find_packages

with open('requirements.txt') as f:
    requirements = f.read().splitlines()

setup(
    name='oddsalchemist_engine',
    version='1.0.0',
    packages=find_packages(exclude=['tests', 'tests.*']),
    description='Race odds extraction and anomaly detection service.',
    long_description='This package contains the HTML odds extractor, the odds anomaly detector and the FastAPI service around them.',
    install_requires=requirements,
    extras_require={
        'test': [
            'pytest',
            'pytest-asyncio',
            'respx',
            'asgi-lifespan',
        ],
    },
    entry_points={
        'console_scripts': [
            'oddsalchemist-engine=odds_service.run_api:main',
        ],
    },
    python_requires='>=3.10',
)
