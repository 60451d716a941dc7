#!/usr/bin/env python

import logging
import sys
import unidata.info

if sys.hexversion < 0x03070000:
    logging.error("unidata requires Python Version 3.7 (or greater)")
else:
    from setuptools import setup

    with open('README.rst') as f:
        long_description = f.read()

    setup(name=unidata.info.name,
          version=unidata.info.version,
          description=unidata.info.title,
          long_description=long_description,
          url=unidata.info.home,
          packages=['unidata'],
          package_data={'unidata': ['UnicodeData.json']},
          entry_points={
              'console_scripts': ['unidata = unidata.app:main']},
          classifiers=['Development Status :: 3 - Alpha',
                       'Intended Audience :: Developers',
                       'Natural Language :: English',
                       'Operating System :: OS Independent',
                       'Programming Language :: Python',
                       'Programming Language :: Python :: 3',
                       'Topic :: Text Processing',
                       'Topic :: Software Development :: '
                       'Libraries :: Python Modules']
          )
