from setuptools import setup

version = {}
with open('fermicalc/version.py', 'r') as f:
    exec(f.read(), version)

with open('README.md', 'r') as f:
    long_description = f.read()

setup(
    name='fermicalc',
    version=version['__version__'],
    description='Fermi estimation calculator using Monte Carlo sampling',
    long_description=long_description,
    long_description_content_type='text/markdown',
    python_requires='>=3.7',
    install_requires=[
        'numpy>=1.19',
        'scipy>=1.5',
        'markdown>=3.3',
        'pyyaml>=5.4',
        ],
    extras_require={'test': ['pytest']},
    packages=['fermicalc', 'fermicalc.common', 'fermicalc.estimate', 'fermicalc.project'],
    entry_points={
        'console_scripts': ['fermicalc = fermicalc.__main__:main_estimate',
                            'fermicalcf = fermicalc.__main__:main_setup',
                            ],
        },
    classifiers=[
        'Programming Language :: Python',
        'Programming Language :: Python :: 3',
        'Development Status :: 4 - Beta',
        'Operating System :: OS Independent',
        ]
    )
