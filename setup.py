from setuptools import setup

setup(
    name='aioxattr',
    version='0.1.0',
    description='Asynchronous Linux extended attribute access via libc',
    license='LGPL-3.0-or-later',
    python_requires='>=3.10',
    classifiers=[
        'Operating System :: POSIX :: Linux',
        'Programming Language :: Python :: 3',
        'Framework :: AsyncIO',
    ],
    packages=['aioxattr', '_aioxattr_scripts'],
    package_dir={
        '_aioxattr_scripts': 'scripts',
    },
    package_data={
        'aioxattr': ['py.typed'],
    },
    extras_require={
        'test': ['pytest'],
    },
    entry_points={
        'console_scripts': [
            'aioxattr_getfattr=_aioxattr_scripts._getfattr:main',
            'aioxattr_setfattr=_aioxattr_scripts._setfattr:main',
        ],
    },
)
