#!/usr/bin/env python3
from setuptools import setup, find_packages
from pathlib import Path
this_directory = Path(__file__).parent
long_description = (this_directory / "README.md").read_text(encoding="utf-8")

def get_version():
    try:
        with open('config/constants.py', 'r', encoding='utf-8') as f:
            for line in f:
                if line.startswith('__version__'):
                    return line.split('=')[1].strip().strip('"\'')
    except Exception:
        return "1.0.0"

setup(
    name="certbadge",
    version=get_version(),
    description="TLS connection trust classification, page state cache and certificate detail views",
    long_description=long_description,
    long_description_content_type="text/markdown",
    author="certbadge developers",
    packages=find_packages(include=['src', 'src.*', 'config', 'config.*']),
    package_data={'config': ['icons/*.svg']},
    include_package_data=True,
    py_modules=["certbadge"],
    python_requires=">=3.9",
    install_requires=[
        "requests>=2.28.0",
        "urllib3>=1.26.0",
        "rich>=13.0.0",
    ],
    extras_require={
        'dev': [
            'pytest>=7.0.0',
            'pytest-cov>=4.0.0',
            'pytest-asyncio>=0.21.0',
            'black>=23.0.0',
            'flake8>=6.0.0',
            'mypy>=1.0.0',
        ],
    },
    entry_points={
        'console_scripts': [
            'certbadge=certbadge:main',
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: Developers",
        "Intended Audience :: Information Technology",
        "License :: OSI Approved :: MIT License",
        "Natural Language :: English",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Security",
        "Topic :: Security :: Cryptography",
        "Topic :: Internet :: WWW/HTTP :: Browsers",
        "Topic :: Utilities",
    ],
    keywords=[
        "security",
        "tls",
        "certificate",
        "cipher-suite",
        "browser",
    ],
)
