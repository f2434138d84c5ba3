"""
Setup script for Solar Flare MCMC package
"""

from setuptools import setup, find_packages
import os

# Read README for long description
def read_file(filename):
    filepath = os.path.join(os.path.dirname(__file__), filename)
    # Try encodings in order: utf-8-sig (UTF-8 BOM), utf-16 (Windows BOM), utf-8, latin-1
    for enc in ('utf-8-sig', 'utf-16', 'utf-8', 'latin-1'):
        try:
            with open(filepath, encoding=enc) as f:
                return f.read()
        except (UnicodeDecodeError, LookupError, OSError):
            continue
    return ''

setup(
    name='solar-flare-mcmc',
    version='0.1.0',
    author='Mahdad',
    author_email='your.email@example.com',
    description='Bayesian MCMC parameter estimation for a parametric solar flare signal model',
    long_description=read_file('README.md'),
    long_description_content_type='text/markdown',
    url='https://github.com/yourusername/solar-flare-mcmc',
    license='MIT',

    # Package discovery from src/
    packages=find_packages(where="src"),
    package_dir={"": "src"},

    python_requires='>=3.8',

    install_requires=[
        'numpy>=1.21.0',
        'matplotlib>=3.5.0',
        'seaborn>=0.11.0',
        'pandas>=1.3.0',
        'tqdm>=4.62.0',
    ],

    extras_require={
        'dev': [
            'pytest>=7.0.0',
            'pytest-cov>=3.0.0',
            'black>=22.0.0',
            'flake8>=4.0.0',
        ],
    },

    classifiers=[
        'Development Status :: 3 - Alpha',
        'Intended Audience :: Science/Research',
        'License :: OSI Approved :: MIT License',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.8',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Topic :: Scientific/Engineering :: Astronomy',
        'Topic :: Scientific/Engineering :: Physics',
    ],

    keywords='solar-flare bayesian-inference mcmc metropolis parameter-estimation',

    project_urls={
        'Source': 'https://github.com/yourusername/solar-flare-mcmc',
        'Tracker': 'https://github.com/yourusername/solar-flare-mcmc/issues',
    },
)
