# institution_recommender/config.py
import os

# project-root/institution_recommender/config.py -> project-root
BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

# where the JSON / CSV training files live (searched recursively)
DATA_DIR = os.environ.get('RECOMMENDER_DATA_DIR', os.path.join(BASE_DIR, 'trainingDataSets'))

# fraction of each dataset held out for evaluate(); 0 trains on everything
TEST_RATIO = float(os.environ.get('RECOMMENDER_TEST_RATIO', '0') or 0)
RANDOM_STATE = int(os.environ.get('RECOMMENDER_RANDOM_STATE', '42'))

LOG_LEVEL = os.environ.get('RECOMMENDER_LOG_LEVEL', 'INFO')
LOG_DIR = os.environ.get('RECOMMENDER_LOG_DIR') or None

# label columns, checked in order against the first record of a dataset
TARGET_CANDIDATES = ['College', 'Suggested_Job_Role']
TARGET_ALIASES = ['suggested_job_role', 'suggested_job']
DEFAULT_TARGET = 'College'

# auxiliary column never used as a feature
RESERVED_COLUMNS = ['Tier']

DEFAULT_DATASET = 'see'
