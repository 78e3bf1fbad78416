from models.base import Base

from models.donation import Donation
from models.campaign import CampaignSettings
