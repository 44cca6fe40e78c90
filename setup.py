import schemagen
from setuptools import setup

setup(
    name='schemagen',
    description='Infer draft-07 JSON Schema from JSON documents.',
    version=schemagen.__version__,
    url='N/A',
    author='ycyuxin',
    author_email='ycyuxin(at)qq.com',
    packages=['schemagen'],
    entry_points={
        'console_scripts':
            [
                'schemagen = schemagen.infer:run',
            ]
    },
    install_requires=[
        'click',
        'jsonschema',
        'PyYAML',
        'pyaml',
    ],
    extras_require={
        'test': [
            'pytest',
        ]
    },
    zip_safe=False
)
