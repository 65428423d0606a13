"""Setup script for the openFDA Drug Label MCP Server."""

from setuptools import setup, find_packages
import os

# Read the README file
def read_readme():
    readme_path = os.path.join(os.path.dirname(__file__), 'README.md')
    if os.path.exists(readme_path):
        with open(readme_path, 'r', encoding='utf-8') as f:
            return f.read()
    return "openFDA Drug Label MCP Server - Model Context Protocol tools for FDA drug labeling"

setup(
    name='openfda-drug-label-mcp',
    version='0.1.0',
    description='MCP (Model Context Protocol) server for openFDA drug label lookups',
    long_description=read_readme(),
    long_description_content_type='text/markdown',
    author='openFDA MCP Server Team',
    author_email='dev@example.com',

    packages=find_packages(exclude=['tests', 'tests.*']),
    py_modules=['mcp_openfda_server'],
    python_requires='>=3.11',
    install_requires=[
        'mcp>=1.6.0,<2',
        'requests>=2.31.0',
        'pydantic>=2.0.0',
        'click>=8.1.0',
        'python-dotenv>=1.0.0',
        'pyyaml>=6.0',
    ],

    extras_require={
        'dev': [
            'pytest>=7.4.0',
            'pytest-asyncio>=0.21.0',
            'pytest-cov>=4.1.0',
            'black>=23.0.0',
            'flake8>=6.0.0',
            'mypy>=1.5.0',
        ],
    },

    entry_points={
        'console_scripts': [
            'openfda-mcp=openfda_mcp.cli:cli',
        ],
    },

    classifiers=[
        'Development Status :: 3 - Alpha',
        'Intended Audience :: Healthcare Industry',
        'Topic :: Scientific/Engineering :: Medical Science Apps.',
        'License :: OSI Approved :: MIT License',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
    ],

    keywords='openfda fda drug label mcp model-context-protocol ai',

    include_package_data=True,
    zip_safe=False,
)
