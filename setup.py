from setuptools import setup, find_packages
import re

# Read version from gmailfilter/__init__.py
with open('gmailfilter/__init__.py') as f:
    version = re.search(r'^__version__ = ["\']([^"\']+)["\']', f.read(), re.MULTILINE).group(1)

setup(
    name='gmailfilter',
    version=version,
    packages=find_packages(exclude=['tests', 'tests.*']),
    install_requires=[
        'google-api-python-client',
        'google-auth',
        'python-dotenv',
        'click>=8.0',
        'PyYAML',
        'click_option_group',
    ],
    extras_require={
        'test': ['pytest', 'httplib2'],
    },
    entry_points={
        'console_scripts': [
            'gmailfilter=gmailfilter.cli.__main__:main',
        ],
    },
    author='CLI Developer',
    description='Gmail filter and label provider - declare Gmail filters and labels, plan and apply them with ADC.',
    long_description=open('README.md').read(),
    long_description_content_type='text/markdown',
)
