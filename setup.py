from setuptools import setup, find_packages

setup(
    name="field-validator",
    version="0.1.0",
    description="Declarative per-field validation of structured input with rule strings, custom rules and lifecycle hooks",
    packages=find_packages(exclude=["tests", "tests.*"]),
    package_data={
        'field_validator': ['local-config.yaml'],
    },
    include_package_data=True,
    install_requires=[
        'pyyaml>=6.0',
        'jsonschema>=4.17.0',
        'requests>=2.28.0',
    ],
    extras_require={
        'test': ['pytest>=7.0'],
    },
    entry_points={
        'console_scripts': [
            'field-validator-rpc=field_validator.jsonrpc_server:main',
        ],
    },
    python_requires='>=3.9',
)
