from setuptools import setup, find_packages
import os
import io

PACKAGE = "leafsim"
NAME = "LeafSim"
DESCRIPTION = 'Leaf organ model for sorghum: dry matter and nitrogen ' \
              'supply and demand, canopy development and ' \
              'senescence by light, water and frost.'
AUTHOR = "Allard de Wit"
AUTHOR_EMAIL = 'allard.dewit@wur.nl'
URL = 'http://github.com/ajwdewit/leafsim/'
LICENSE="EUPL"
VERSION = "1.0.0"

here = os.path.abspath(os.path.dirname(__file__))


def read(*filenames, **kwargs):
    encoding = kwargs.get('encoding', 'utf-8')
    sep = kwargs.get('sep', '\n')
    buf = []
    for filename in filenames:
        with io.open(os.path.join(here, filename), encoding=encoding) as f:
            buf.append(f.read())
    return sep.join(buf)


long_description = read('README.rst')

setup(
    name=NAME,
    version=VERSION,
    url=URL,
    license=LICENSE,
    author=AUTHOR,
    install_requires=['traitlets-pcse==5.0.0.dev',
                      'PyDispatcher>=2.0.5',
                      'numpy>=1.20'],
    extras_require={'test': ['pytest>=6.0']},
    author_email=AUTHOR_EMAIL,
    description=DESCRIPTION,
    long_description=long_description,
    packages=find_packages(include=[PACKAGE, PACKAGE + ".*"]),
    include_package_data=True,
    platforms='any',
    test_suite='leafsim.tests.make_test_suite',
    classifiers=[
        'Development Status :: 4 - Beta',
        'Environment :: Console',
        'Intended Audience :: Developers',
        'Intended Audience :: Science/Research',
        'License :: OSI Approved :: European Union Public Licence 1.2 (EUPL 1.2)',
        'Natural Language :: English',
        'Operating System :: OS Independent',
        'Programming Language :: Python :: 3',
        'Topic :: Scientific/Engineering']
)
