'''
    ---------------------------------------------------------------------------
    OpenCap processing: modelInfoPredSim.py
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

    This script describes the coordinates and muscles of the musculoskeletal
    model: ordered coordinate names, their indices, and the joint groups used
    when adjusting the bounds. Groups are resolved once, by name, such that
    the rest of the pipeline never does index arithmetic on names.
'''

import copy
from collections import namedtuple

from errorsPredSim import ConfigurationMismatch

CoordinateDescriptor = namedtuple('CoordinateDescriptor',
                                  ['name', 'index', 'groups'])

# Groups that can be provided by the user. The elbow and shoulder_flex groups
# are always derived from the arm groups.
baseGroups = ['floating_base', 'leg_r', 'leg_l', 'torso', 'arm_r', 'arm_l',
              'mtp']
derivedGroups = ['elbow', 'shoulder_flex']

# Order of the floating base coordinates.
floatingBaseRoles = ['tilt', 'list', 'rotation', 'tx', 'ty', 'tz']

# %% Default coordinates (Rajagopal-based OpenCap models).
def get_default_joints(withMTP=True, withArms=True):

    joints = ['pelvis_tilt', 'pelvis_list', 'pelvis_rotation', 'pelvis_tx',
              'pelvis_ty', 'pelvis_tz', 'hip_flexion_l', 'hip_adduction_l',
              'hip_rotation_l', 'hip_flexion_r', 'hip_adduction_r',
              'hip_rotation_r', 'knee_angle_l', 'knee_angle_r',
              'ankle_angle_l', 'ankle_angle_r', 'subtalar_angle_l',
              'subtalar_angle_r', 'mtp_angle_l', 'mtp_angle_r',
              'lumbar_extension', 'lumbar_bending', 'lumbar_rotation']
    if not withMTP:
        for joint in ['mtp_angle_l', 'mtp_angle_r']:
            joints.remove(joint)
    if withArms:
        joints += ['arm_flex_l', 'arm_add_l', 'arm_rot_l',
                   'arm_flex_r', 'arm_add_r', 'arm_rot_r',
                   'elbow_flex_l', 'elbow_flex_r', 'pro_sup_l', 'pro_sup_r']

    return joints

# %% Default muscles (both sides).
def get_default_muscles():

    rightSideMuscles = [
        'addbrev_r', 'addlong_r', 'addmagDist_r', 'addmagIsch_r',
        'addmagMid_r', 'addmagProx_r', 'bflh_r', 'bfsh_r', 'edl_r', 'ehl_r',
        'fdl_r', 'fhl_r', 'gaslat_r', 'gasmed_r', 'glmax1_r', 'glmax2_r',
        'glmax3_r', 'glmed1_r', 'glmed2_r', 'glmed3_r', 'glmin1_r', 'glmin2_r',
        'glmin3_r', 'grac_r', 'iliacus_r', 'perbrev_r', 'perlong_r', 'piri_r',
        'psoas_r', 'recfem_r', 'sart_r', 'semimem_r', 'semiten_r', 'soleus_r',
        'tfl_r', 'tibant_r', 'tibpost_r', 'vasint_r', 'vaslat_r', 'vasmed_r']
    leftSideMuscles = [muscle[:-1] + 'l' for muscle in rightSideMuscles]

    return leftSideMuscles + rightSideMuscles

# %% Get indices in list.
def getIndices(mylist, items):

    missing = [item for item in items if item not in mylist]
    if missing:
        raise ConfigurationMismatch(
            'Not found in the model: {}'.format(', '.join(missing)))
    indices = [mylist.index(item) for item in items]

    return indices

# %% Classify coordinates based on OpenCap naming conventions.
def classify_coordinates(joints):

    groups = {group: [] for group in baseGroups}
    legPrefixes = ('hip_', 'knee_', 'ankle_', 'subtalar_')
    armPrefixes = ('arm_', 'elbow_', 'pro_sup_', 'wrist_')
    for joint in joints:
        if 'mtp' in joint:
            groups['mtp'].append(joint)
        elif joint.startswith('pelvis_'):
            groups['floating_base'].append(joint)
        elif joint.startswith('lumbar_'):
            groups['torso'].append(joint)
        elif joint.startswith(legPrefixes) and joint[-2:] in ['_r', '_l']:
            groups['leg' + joint[-2:]].append(joint)
        elif joint.startswith(armPrefixes) and joint[-2:] in ['_r', '_l']:
            groups['arm' + joint[-2:]].append(joint)

    return groups

class model_info:

    def __init__(self, joints, muscles, groups=None):

        if len(set(joints)) != len(joints):
            raise ConfigurationMismatch('Duplicated coordinate names.')
        if len(set(muscles)) != len(muscles):
            raise ConfigurationMismatch('Duplicated muscle names.')
        self.joints = list(joints)
        self.muscles = list(muscles)

        if groups is None:
            groups = classify_coordinates(self.joints)
        self.groups = self._resolve_groups(groups)
        if len(self.groups['floating_base']) != len(floatingBaseRoles):
            raise ConfigurationMismatch(
                'Expected {} floating base coordinates, got {}.'.format(
                    len(floatingBaseRoles), len(self.groups['floating_base'])))
        self.floating_base = dict(zip(floatingBaseRoles,
                                      self.groups['floating_base']))

        self.coordinates = {}
        for count, joint in enumerate(self.joints):
            c_groups = frozenset(group for group in self.groups
                                 if joint in self.groups[group])
            self.coordinates[joint] = CoordinateDescriptor(
                joint, count, c_groups)

    def _resolve_groups(self, groups):

        unknown = [group for group in groups if group not in baseGroups]
        if unknown:
            raise ConfigurationMismatch(
                'Unknown joint groups: {}'.format(', '.join(unknown)))
        resolved = {}
        for group in baseGroups:
            resolved[group] = list(groups.get(group, []))
            getIndices(self.joints, resolved[group])
        arms = [joint for joint in self.joints
                if joint in resolved['arm_r'] + resolved['arm_l']]
        resolved['elbow'] = [joint for joint in arms if 'elbow' in joint]
        resolved['shoulder_flex'] = [
            joint for joint in arms if 'flex' in joint and
            'elbow' not in joint and 'wrist' not in joint]

        return resolved

    def getGroup(self, group):

        if group not in self.groups:
            raise ConfigurationMismatch('Unknown joint group: {}'.format(group))

        return copy.copy(self.groups[group])

    def getIndex(self, joint):

        if joint not in self.coordinates:
            raise ConfigurationMismatch(
                'Coordinate {} not in the model.'.format(joint))

        return self.coordinates[joint].index

    @property
    def armJoints(self):
        arms = self.groups['arm_r'] + self.groups['arm_l']
        return [joint for joint in self.joints if joint in arms]
