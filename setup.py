'''Setup.py'''

from setuptools import find_packages, setup

setup(
    name='conicfit',
    version='0.1.0',
    packages=find_packages(),
    scripts=[],
    license='GPLv3',
    description='Direct and Taubin conic fitting for Python',
    long_description=open('README.rst', encoding='utf-8').read(),
    install_requires=[
        "numpy>=1.19.1",
    ],
    extras_require={
        "test": ["pytest"],
    },
    python_requires='>=3.7',
)
