'''
    ---------------------------------------------------------------------------
    OpenCap processing: utilsProcessing.py
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

import logging
import numpy as np
import pandas as pd
from scipy import signal

# %% Zero-lag low-pass Butterworth filter.
# The filter is applied twice (forward and backward), the order is therefore
# halved to get an effective filter of the requested order.
def lowPassFilter(time, data, lowpass_cutoff_frequency, order=4):

    fs = 1/np.round(np.mean(np.diff(time)),16)
    wn = lowpass_cutoff_frequency/(fs/2)
    if wn >= 0.999:
        logging.warning(
            'You tried to filter {}Hz signal with cutoff freq of {}Hz, which '
            'is above the Nyquist Frequency. Will filter at {}Hz '
            'instead.'.format(fs, lowpass_cutoff_frequency, fs/2))
        wn = 0.999
    sos = signal.butter(int(order/2), wn, btype='low', output='sos')
    dataFilt = signal.sosfiltfilt(sos, data, axis=0)

    return dataFilt

# %% Filter data frame.
def filterDataFrame(dataFrame, cutoff_frequency=6, order=4):

    columns_keys = [i for i in dataFrame.columns if i != 'time']
    time = dataFrame['time'].to_numpy()
    output = lowPassFilter(time, dataFrame[columns_keys].to_numpy(),
                           cutoff_frequency, order=order)
    output = pd.DataFrame(data=output, columns=columns_keys)
    dataFrameFilt = pd.concat(
        [pd.DataFrame(data=time, columns=['time']), output], axis=1)
    logging.info('dataFrame filtered at {}Hz.'.format(cutoff_frequency))

    return dataFrameFilt
