'''
    ---------------------------------------------------------------------------
    OpenCap processing: utils.py
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
'''

import os
import logging
import numpy as np
import pandas as pd
import yaml

# %% Set up logging.
def setup_logging(logPath=None, level=logging.INFO):

    # Remove all handlers associated with the root logger object.
    for handler in logging.root.handlers[:]:
        logging.root.removeHandler(handler)
    if logPath is None:
        logging.basicConfig(format='%(message)s', level=level)
    else:
        if os.path.exists(logPath):
            os.remove(logPath)
        logging.basicConfig(filename=logPath, format='%(message)s',
                            level=level)

# %% Import yaml file.
def import_metadata(filePath):

    with open(filePath) as myYamlFile:
        parsedYamlFile = yaml.load(myYamlFile, Loader=yaml.FullLoader)

    return parsedYamlFile

# %% Storage file header.
def get_storage_metadata(storage_file):
    """Returns the key=value entries of the header of a storage file, e.g.,
    {'version': '1', 'inDegrees': 'yes'}. Lines without '=' are ignored.
    """

    metadata = {}
    with open(storage_file, 'r') as f:
        for line in f:
            if line.count('endheader') != 0:
                break
            if '=' in line:
                key, value = line.split('=', 1)
                metadata[key.strip()] = value.strip()

    return metadata

# %%  Storage file to numpy array.
def storage_to_numpy(storage_file, excess_header_entries=0):
    """Returns the data from a storage file in a numpy format. Skips all lines
    up to and including the line that says 'endheader'.
    Parameters
    ----------
    storage_file : str
        Path to an OpenSim Storage (.sto) or Motion (.mot) file.
    excess_header_entries : int, optional
        If the header row has more names in it than there are data columns.
        We'll ignore this many header row entries from the end of the header
        row.
    Returns
    -------
    data : np.ndarray
        Numpy structured array with all columns from the storage file,
        indexable by column name.
    Examples
    --------
        >>> data = storage_to_numpy('<filename>')
        >>> data['pelvis_tx']
    """

    line_number_of_line_containing_endheader = None
    column_names = []
    with open(storage_file, 'r') as f:
        header_line = False
        for i, line in enumerate(f):
            if header_line:
                column_names = line.split()
                break
            if line.count('endheader') != 0:
                line_number_of_line_containing_endheader = i + 1
                header_line = True
    if line_number_of_line_containing_endheader is None:
        raise ValueError(
            'No endheader line found in {}.'.format(storage_file))

    if excess_header_entries == 0:
        names = True
        skip_header = line_number_of_line_containing_endheader
    else:
        names = column_names[:-excess_header_entries]
        skip_header = line_number_of_line_containing_endheader + 1
    data = np.genfromtxt(storage_file, names=names, skip_header=skip_header)

    return data

# %%  Storage file to dataframe.
def storage_to_dataframe(storage_file, headers):

    data = storage_to_numpy(storage_file)
    out = pd.DataFrame(data=data['time'], columns=['time'])
    for count, header in enumerate(headers):
        out.insert(count + 1, header, data[header])

    return out

# %%  Numpy array to storage file.
def numpy_to_storage(labels, data, storage_file, datatype=None,
                     inDegrees=True):

    if data.shape[1] != len(labels):
        raise ValueError("# labels doesn't match columns")
    if labels[0] != "time":
        raise ValueError("First label should be time")

    with open(storage_file, 'w') as f:
        # Old style
        if datatype is None:
            f.write('name %s\n' %storage_file)
            f.write('datacolumns %d\n' %data.shape[1])
            f.write('datarows %d\n' %data.shape[0])
            f.write('range %f %f\n' %(np.min(data[:, 0]), np.max(data[:, 0])))
        # New style
        elif datatype == 'IK':
            f.write('Coordinates\n')
            f.write('version=1\n')
            f.write('nRows=%d\n' %data.shape[0])
            f.write('nColumns=%d\n' %data.shape[1])
            f.write('inDegrees=%s\n\n' %('yes' if inDegrees else 'no'))
            f.write('Units are S.I. units (second, meters, Newtons, ...)\n')
            f.write("If the header above contains a line with 'inDegrees', this indicates whether rotational values are in degrees (yes) or radians (no).\n\n")
        else:
            raise ValueError('Unknown storage datatype: {}'.format(datatype))
        f.write('endheader\n')
        f.write('\t'.join(labels) + '\n')
        for i in range(data.shape[0]):
            f.write('\t'.join('%20.8f' %value for value in data[i, :]))
            f.write('\n')
