from setuptools import find_packages, setup

setup(
    name='armprovision',
    version='0.3',
    py_modules=['armprovision'],
    packages=find_packages(exclude=['tests', 'tests.*']),
    install_requires=[
        'Click',
        'python-hcl2',
        'PyYAML',
        'azure-core',
        'azure-identity',
        'azure-mgmt-compute',
        'azure-mgmt-devtestlabs',
        'azure-mgmt-datalake-analytics>=1.0.0b1',
    ],
    extras_require={
        'test': ['pytest'],
    },
    entry_points='''
        [console_scripts]
        armprovision=armprovision:cli
    ''',
)
