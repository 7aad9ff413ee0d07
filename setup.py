"""Install MARO users package."""

from setuptools import setup, find_packages

setup(
    name='maro-users',
    version='0.1.0',
    packages=find_packages(exclude=['*test*']),
    install_requires=[
        "flask",
        "flask-sqlalchemy",
        "sqlalchemy",
        "pyjwt",
        "pytz",
        "requests",
        "click",
        "python-json-logger"
    ],
    extras_require={
        "test": [
            "pytest",
            "hypothesis",
            "mimesis"
        ]
    },
    entry_points={
        'console_scripts': ['maro-users=maro.users.cli:cli']
    },
    zip_safe=False
)
