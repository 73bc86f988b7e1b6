'''
    ---------------------------------------------------------------------------
    OpenCap processing: kinematicsPredSim.py
    ---------------------------------------------------------------------------
    Copyright 2022 Stanford University and the Authors

    Author(s): Antoine Falisse, Scott Uhlrich

    Licensed under the Apache License, Version 2.0 (the "License"); you may not
    use this file except in compliance with the License. You may obtain a copy
    of the License at http://www.apache.org/licenses/LICENSE-2.0
    Unless required by applicable law or agreed to in writing, software
    distributed under the License is distributed on an "AS IS" BASIS,
    WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
    See the License for the specific language governing permissions and
    limitations under the License.

    This script loads the reference kinematics informing the bounds.
'''

import os
import numpy as np
import pandas as pd

from errorsPredSim import (ConfigurationMismatch, PreconditionViolation,
                           InvalidSettings)
from utils import storage_to_numpy, get_storage_metadata
from utilsProcessing import filterDataFrame

translationalJoints = ['pelvis_tx', 'pelvis_ty', 'pelvis_tz']

# %% Verify kinematics can be splined.
def checkKinematics(Qs, joints):

    if 'time' not in Qs.columns:
        raise PreconditionViolation('No time column in the kinematics.')
    missing = [joint for joint in joints if joint not in Qs.columns]
    if missing:
        raise ConfigurationMismatch(
            'Coordinates missing from the kinematics: {}'.format(
                ', '.join(missing)))
    time = Qs['time'].to_numpy(dtype=float)
    # Cubic splines need at least 4 samples.
    if time.shape[0] < 4:
        raise PreconditionViolation(
            'At least 4 samples are needed, got {}.'.format(time.shape[0]))
    if not np.all(np.isfinite(time)) or not np.all(np.diff(time) > 0):
        raise PreconditionViolation('Time should be strictly increasing.')
    data = Qs[joints].to_numpy(dtype=float)
    if not np.all(np.isfinite(data)):
        raise PreconditionViolation('Kinematics contain non-finite values.')

# %% Extract inverse kinematics data.
def getIK(storage_file, joints, degrees=False, filter_frequency=None,
          translationalJoints=translationalJoints):

    # Check if data is in degrees or in radians.
    inDegrees = get_storage_metadata(storage_file).get('inDegrees', 'no')

    data = storage_to_numpy(storage_file)
    if data.dtype.names is None or 'time' not in data.dtype.names:
        raise PreconditionViolation(
            'No time column in {}.'.format(storage_file))
    missing = [joint for joint in joints if joint not in data.dtype.names]
    if missing:
        raise ConfigurationMismatch(
            'Coordinates missing from {}: {}'.format(
                storage_file, ', '.join(missing)))
    Qs = pd.DataFrame(data=np.atleast_1d(data['time']), columns=['time'])
    for count, joint in enumerate(joints):
        values = np.atleast_1d(data[joint])
        if joint in translationalJoints:
            Qs.insert(count + 1, joint, values)
        else:
            if inDegrees == 'no' and degrees == True:
                Qs.insert(count + 1, joint, values / np.pi * 180)
            elif inDegrees == 'yes' and degrees == False:
                Qs.insert(count + 1, joint, values * np.pi / 180)
            else:
                Qs.insert(count + 1, joint, values)
    checkKinematics(Qs, joints)
    if filter_frequency is not None:
        # Padding of the zero-lag filter.
        if Qs.shape[0] <= 9:
            raise PreconditionViolation(
                'At least 10 samples are needed for filtering, got {}.'.format(
                    Qs.shape[0]))
        Qs = filterDataFrame(Qs, cutoff_frequency=filter_frequency)

    return Qs

# %% Reference kinematics from settings.
def getIKFromSettings(settings, model_info):

    subject = settings['subject']
    if not subject['IKfile_bounds']:
        raise InvalidSettings('subject.IKfile_bounds is not set.')
    pathIK = subject['IKfile_bounds']
    if subject['folder_name']:
        pathIK = os.path.join(subject['folder_name'], pathIK)

    return getIK(pathIK, model_info.joints,
                 filter_frequency=settings['bounds']['filter_frequency'],
                 translationalJoints=[model_info.floating_base[role]
                                      for role in ['tx', 'ty', 'tz']])
