from pathlib import Path

from setuptools import find_packages, setup

setup(
    name='uamio',
    version='1.0.0',
    packages=find_packages(),
    license='GPLv3',
    description='Read binary UAM files from air quality models',
    long_description=(Path(__file__).parent / 'README.rst').read_text(),
    keywords=['UAM', 'CAMx', 'air quality', 'emissions'],
    classifiers=[
        'Intended Audience :: Science/Research',
        'Operating System :: OS Independent',
        'Programming Language :: Python',
        'Programming Language :: Python :: 3',
        'Topic :: Scientific/Engineering :: Atmospheric Science',
        'License :: OSI Approved :: GNU General Public License v3 (GPLv3)',
    ],
    python_requires='>=3.8',
    install_requires=['numpy', 'tables>=3.3.0', 'progressbar2>=3.7.0'],
    extras_require={'dev': ['ruff', 'coverage']},
)
