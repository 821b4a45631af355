"""
行政区划与目的地推荐的只读数据表
进程启动时初始化一次，运行期间不可修改
"""

from types import MappingProxyType
from typing import Mapping, Tuple

# 四个直辖市：名称本身同时具有省级和市级含义，统一按城市处理
MUNICIPALITIES: Tuple[str, ...] = ("北京", "上海", "天津", "重庆")

# 一级行政区简称（省、自治区、直辖市、特别行政区）
PROVINCE_SHORT_NAMES: Tuple[str, ...] = (
    "北京", "天津", "上海", "重庆", "河北", "山西", "辽宁", "吉林", "黑龙江",
    "江苏", "浙江", "安徽", "福建", "江西", "山东", "河南", "湖北", "湖南",
    "广东", "广西", "海南", "四川", "贵州", "云南", "西藏", "陕西", "甘肃",
    "青海", "宁夏", "新疆", "内蒙古", "台湾", "香港", "澳门",
)

# 简称 → 标准全称
_CANONICAL_PROVINCES = {
    "北京": "北京市",
    "天津": "天津市",
    "上海": "上海市",
    "重庆": "重庆市",
    "河北": "河北省",
    "山西": "山西省",
    "辽宁": "辽宁省",
    "吉林": "吉林省",
    "黑龙江": "黑龙江省",
    "江苏": "江苏省",
    "浙江": "浙江省",
    "安徽": "安徽省",
    "福建": "福建省",
    "江西": "江西省",
    "山东": "山东省",
    "河南": "河南省",
    "湖北": "湖北省",
    "湖南": "湖南省",
    "广东": "广东省",
    "海南": "海南省",
    "四川": "四川省",
    "贵州": "贵州省",
    "云南": "云南省",
    "陕西": "陕西省",
    "甘肃": "甘肃省",
    "青海": "青海省",
    "台湾": "台湾省",
    "内蒙古": "内蒙古自治区",
    "广西": "广西壮族自治区",
    "西藏": "西藏自治区",
    "宁夏": "宁夏回族自治区",
    "新疆": "新疆维吾尔自治区",
    "香港": "香港特别行政区",
    "澳门": "澳门特别行政区",
}

# 常见的非标准写法
_PROVINCE_ALIASES = {
    "广西自治区": "广西壮族自治区",
    "宁夏自治区": "宁夏回族自治区",
    "新疆自治区": "新疆维吾尔自治区",
    "香港特区": "香港特别行政区",
    "澳门特区": "澳门特别行政区",
}


def _build_synonyms() -> Mapping[str, str]:
    table = {}
    for short_name, long_name in _CANONICAL_PROVINCES.items():
        table[short_name] = long_name
        table[long_name] = long_name
        if not long_name.endswith("市"):
            table[short_name + "省"] = long_name
    table.update(_PROVINCE_ALIASES)
    return MappingProxyType(table)


# 所有已知写法 → 标准全称
PROVINCE_SYNONYMS: Mapping[str, str] = _build_synonyms()

# 标准全称 → 简称
PROVINCE_LONG_TO_SHORT: Mapping[str, str] = MappingProxyType(
    {long_name: short_name for short_name, long_name in _CANONICAL_PROVINCES.items()}
)

# 省级行政区全称后缀，按长度从长到短排列
PROVINCE_SUFFIXES: Tuple[str, ...] = (
    "维吾尔自治区", "壮族自治区", "回族自治区", "特别行政区", "自治区", "特区", "省",
)

# 东北三省：高德返回的城市/地址常只带省份简称，预过滤时放宽匹配
NORTHEAST_PROVINCES: Tuple[str, ...] = ("辽宁", "吉林", "黑龙江")

# 东北三省地级行政区 → 省份简称（搜索范围是城市时用来找所属省份）
NORTHEAST_CITY_PROVINCES: Mapping[str, str] = MappingProxyType({
    **{city: "辽宁" for city in (
        "沈阳", "大连", "鞍山", "抚顺", "本溪", "丹东", "锦州", "营口",
        "阜新", "辽阳", "盘锦", "铁岭", "朝阳", "葫芦岛",
    )},
    **{city: "吉林" for city in (
        "长春", "吉林", "四平", "辽源", "通化", "白山", "松原", "白城", "延边", "延吉",
    )},
    **{city: "黑龙江" for city in (
        "哈尔滨", "齐齐哈尔", "鸡西", "鹤岗", "双鸭山", "大庆", "伊春", "佳木斯",
        "七台河", "牡丹江", "黑河", "绥化", "大兴安岭", "漠河",
    )},
})

# 大区/城市群名称 → 代表省份（京津冀、华北等指向北京，按城市处理）
REGION_ALIASES: Mapping[str, str] = MappingProxyType({
    "长江三角洲": "江苏",
    "长三角": "江苏",
    "珠江三角洲": "广东",
    "珠三角": "广东",
    "京津冀": "北京",
    "环渤海": "北京",
    "粤港澳": "广东",
    "大湾区": "广东",
    "东北": "辽宁",
    "西北": "陕西",
    "西南": "四川",
    "华北": "北京",
    "华东": "江苏",
    "华南": "广东",
    "华中": "湖北",
})

# 省会城市（省份推荐目录缺失时的兜底）
PROVINCIAL_CAPITALS: Mapping[str, str] = MappingProxyType({
    "河北省": "石家庄",
    "山西省": "太原",
    "辽宁省": "沈阳",
    "吉林省": "长春",
    "黑龙江省": "哈尔滨",
    "江苏省": "南京",
    "浙江省": "杭州",
    "安徽省": "合肥",
    "福建省": "福州",
    "江西省": "南昌",
    "山东省": "济南",
    "河南省": "郑州",
    "湖北省": "武汉",
    "湖南省": "长沙",
    "广东省": "广州",
    "海南省": "海口",
    "四川省": "成都",
    "贵州省": "贵阳",
    "云南省": "昆明",
    "陕西省": "西安",
    "甘肃省": "兰州",
    "青海省": "西宁",
    "台湾省": "台北",
    "内蒙古自治区": "呼和浩特",
    "广西壮族自治区": "南宁",
    "西藏自治区": "拉萨",
    "宁夏回族自治区": "银川",
    "新疆维吾尔自治区": "乌鲁木齐",
    "香港特别行政区": "九龙",
    "澳门特别行政区": "氹仔",
})

# 省份 → 推荐城市及一句话理由（2~4 个）
PROVINCE_CITY_CATALOGUE: Mapping[str, Tuple[Tuple[str, str], ...]] = MappingProxyType({
    "河北省": (("承德", "避暑山庄与外八庙，皇家园林代表"), ("秦皇岛", "北戴河海滨与山海关长城"), ("石家庄", "正定古城与赵州桥")),
    "山西省": (("大同", "云冈石窟与悬空寺"), ("平遥", "保存完好的明清古城"), ("太原", "晋祠与山西博物院")),
    "辽宁省": (("大连", "海滨城市，星海广场与老虎滩"), ("沈阳", "沈阳故宫与清昭陵"), ("丹东", "鸭绿江断桥与虎山长城")),
    "吉林省": (("长春", "伪满皇宫与净月潭"), ("延吉", "朝鲜族风情与长白山门户")),
    "黑龙江省": (("哈尔滨", "冰雪大世界与中央大街"), ("漠河", "中国最北端，极光与北极村"), ("牡丹江", "镜泊湖与雪乡")),
    "江苏省": (("南京", "六朝古都，中山陵与夫子庙"), ("苏州", "园林之城，拙政园与平江路"), ("无锡", "太湖鼋头渚与灵山大佛"), ("扬州", "瘦西湖与淮扬美食")),
    "浙江省": (("杭州", "西湖与灵隐寺，人间天堂"), ("宁波", "天一阁与东钱湖"), ("绍兴", "鲁迅故里与水乡古镇"), ("舟山", "普陀山与海岛风光")),
    "安徽省": (("黄山", "黄山与宏村、西递古村落"), ("合肥", "包公园与三河古镇"), ("池州", "九华山佛教圣地")),
    "福建省": (("厦门", "鼓浪屿与环岛路"), ("福州", "三坊七巷与鼓山"), ("泉州", "世界遗产海丝起点"), ("武夷山", "丹霞地貌与岩茶")),
    "江西省": (("南昌", "滕王阁与八一起义纪念馆"), ("九江", "庐山与鄱阳湖"), ("景德镇", "千年瓷都"), ("上饶", "婺源油菜花与三清山")),
    "山东省": (("青岛", "红瓦绿树碧海蓝天，啤酒之城"), ("济南", "趵突泉与大明湖"), ("泰安", "五岳之首泰山"), ("烟台", "蓬莱阁与海滨风光")),
    "河南省": (("郑州", "河南省会，少林寺与黄河风景区"), ("洛阳", "龙门石窟与白马寺"), ("开封", "清明上河园与北宋古都")),
    "湖北省": (("武汉", "黄鹤楼与东湖"), ("宜昌", "三峡大坝与三峡人家"), ("恩施", "恩施大峡谷与土家风情")),
    "湖南省": (("长沙", "橘子洲与岳麓山"), ("张家界", "奇峰林立的国家森林公园"), ("凤凰", "沱江边的湘西古城")),
    "广东省": (("广州", "美食之都，广州塔与沙面"), ("深圳", "现代都市与世界之窗"), ("珠海", "情侣路与长隆海洋王国"), ("潮州", "潮汕美食与广济桥")),
    "海南省": (("三亚", "热带海滨，亚龙湾与蜈支洲岛"), ("海口", "骑楼老街与火山口公园"), ("万宁", "冲浪胜地日月湾")),
    "四川省": (("成都", "大熊猫基地与宽窄巷子"), ("乐山", "乐山大佛与峨眉山"), ("阿坝", "九寨沟与黄龙")),
    "贵州省": (("贵阳", "甲秀楼与青岩古镇"), ("安顺", "黄果树瀑布"), ("黔东南", "西江千户苗寨与镇远古镇")),
    "云南省": (("昆明", "春城，滇池与石林"), ("大理", "洱海与大理古城"), ("丽江", "丽江古城与玉龙雪山"), ("西双版纳", "热带雨林与傣族风情")),
    "陕西省": (("西安", "十三朝古都，兵马俑与大雁塔"), ("延安", "革命圣地与黄土风情"), ("汉中", "油菜花海与汉文化")),
    "甘肃省": (("兰州", "黄河风情线与牛肉面"), ("敦煌", "莫高窟与鸣沙山月牙泉"), ("嘉峪关", "明长城西端起点"), ("张掖", "七彩丹霞")),
    "青海省": (("西宁", "塔尔寺与青海湖门户"), ("海北", "青海湖与祁连草原"), ("海西", "茶卡盐湖与柴达木")),
    "台湾省": (("台北", "台北101与故宫博物院"), ("高雄", "港都风情与驳二艺术特区")),
    "内蒙古自治区": (("呼和浩特", "大召寺与草原文化"), ("呼伦贝尔", "大草原与额尔古纳湿地"), ("鄂尔多斯", "响沙湾与成吉思汗陵")),
    "广西壮族自治区": (("桂林", "山水甲天下，漓江与阳朔"), ("南宁", "青秀山与东南亚风情"), ("北海", "银滩与涠洲岛")),
    "西藏自治区": (("拉萨", "布达拉宫与大昭寺"), ("林芝", "雅鲁藏布大峡谷与桃花沟"), ("日喀则", "扎什伦布寺与珠峰大本营")),
    "宁夏回族自治区": (("银川", "西夏王陵与镇北堡影城"), ("中卫", "沙坡头沙漠与黄河")),
    "新疆维吾尔自治区": (("乌鲁木齐", "天山天池与国际大巴扎"), ("伊犁", "那拉提草原与赛里木湖"), ("喀什", "喀什古城与帕米尔高原"), ("吐鲁番", "火焰山与葡萄沟")),
    "香港特别行政区": (("九龙", "尖沙咀星光大道与维港夜景"), ("中环", "太平山顶与兰桂坊")),
    "澳门特别行政区": (("氹仔", "官也街美食与威尼斯人"), ("大三巴", "大三巴牌坊与议事亭前地")),
})

# 全国热门目的地（无法确定目的地时的推荐列表，按推荐顺序排列）
FLAGSHIP_CITIES: Tuple[Tuple[str, str], ...] = (
    ("北京", "故宫、长城与胡同文化，首次出游首选"),
    ("上海", "外滩夜景与海派风情"),
    ("杭州", "西湖山水与江南人文"),
    ("成都", "大熊猫、火锅与慢生活"),
    ("西安", "十三朝古都，兵马俑与古城墙"),
    ("桂林", "漓江山水与阳朔田园"),
    ("三亚", "热带海滨度假胜地"),
    ("厦门", "鼓浪屿与闽南风情"),
)

# 主要城市名录（用于从模糊文本中确认城市词的边界）
MAJOR_CITIES: Tuple[str, ...] = (
    "深圳", "广州", "杭州", "南京", "苏州", "成都", "西安", "武汉", "长沙", "郑州", "无锡", "宁波",
    "济南", "青岛", "大连", "沈阳", "哈尔滨", "长春", "石家庄", "太原", "呼和浩特",
    "南昌", "合肥", "福州", "厦门", "南宁", "海口", "昆明", "贵阳", "拉萨", "兰州",
    "西宁", "银川", "乌鲁木齐", "温州", "佛山", "东莞", "泉州", "惠州", "嘉兴",
    "烟台", "珠海", "镇江", "盐城", "金华", "台州", "绍兴", "湖州", "常州",
    "丹东", "锦州", "本溪", "辽阳", "鞍山", "铁岭", "抚顺", "四平", "松原", "白城", "白山",
    "齐齐哈尔", "牡丹江", "佳木斯", "鹤岗", "绥化", "双鸭山", "大庆",
    "桂林", "丽江", "大理", "三亚", "张家界", "黄山", "承德", "秦皇岛", "威海", "日照",
    "洛阳", "开封", "平遥", "凤凰", "阳朔", "敦煌", "嘉峪关", "张掖", "延吉", "漠河",
    "扬州", "舟山", "武夷山", "九江", "景德镇", "上饶", "泰安", "宜昌", "恩施", "乐山",
    "阿坝", "安顺", "黔东南", "西双版纳", "延安", "汉中", "海北", "海西", "台北", "高雄",
    "呼伦贝尔", "鄂尔多斯", "北海", "林芝", "日喀则", "中卫", "伊犁", "喀什", "吐鲁番",
    "大同", "潮州", "万宁", "池州", "江门", "荆门",
)


def _build_known_cities() -> frozenset:
    names = set(MAJOR_CITIES) | set(MUNICIPALITIES)
    names.update(city for city, _ in FLAGSHIP_CITIES)
    names.update(PROVINCIAL_CAPITALS.values())
    for cities in PROVINCE_CITY_CATALOGUE.values():
        names.update(city for city, _ in cities)
    return frozenset(names)


KNOWN_CITIES: frozenset = _build_known_cities()

# AI 失败时的降级关键词城市
BASIC_FALLBACK_CITIES: Tuple[str, ...] = ("北京", "上海", "广州", "深圳", "杭州", "南京", "苏州", "成都", "西安", "重庆")

# 国外目的地标识（命中即视为超出服务范围）
INTERNATIONAL_KEYWORDS: Tuple[str, ...] = (
    # 热门国家
    "日本", "韩国", "泰国", "新加坡", "马来西亚", "印尼", "越南", "菲律宾", "缅甸", "柬埔寨", "老挝",
    "美国", "加拿大", "英国", "法国", "德国", "意大利", "西班牙", "荷兰", "瑞士", "奥地利", "俄罗斯",
    "澳大利亚", "新西兰", "印度", "巴基斯坦", "孟加拉", "斯里兰卡", "尼泊尔", "不丹", "马尔代夫",
    "土耳其", "伊朗", "伊拉克", "沙特", "阿联酋", "埃及", "摩洛哥", "南非", "肯尼亚", "坦桑尼亚",
    "巴西", "阿根廷", "智利", "秘鲁", "墨西哥", "古巴", "牙买加",
    # 热门国外城市
    "东京", "大阪", "京都", "横滨", "名古屋", "神户", "福冈", "札幌", "仙台", "广岛",
    "首尔", "釜山", "济州岛", "大邱", "仁川",
    "曼谷", "清迈", "普吉岛", "芭提雅", "华欣",
    "吉隆坡", "槟城", "兰卡威",
    "纽约", "洛杉矶", "拉斯维加斯", "旧金山", "芝加哥", "华盛顿", "波士顿", "迈阿密", "西雅图", "奥兰多",
    "伦敦", "巴黎", "罗马", "威尼斯", "佛罗伦萨", "巴塞罗那", "马德里", "阿姆斯特丹", "布鲁塞尔", "米兰",
    "柏林", "慕尼黑", "维也纳", "苏黎世", "莫斯科", "圣彼得堡", "布拉格", "布达佩斯",
    "悉尼", "墨尔本", "奥克兰", "布里斯班", "珀斯", "阿德莱德",
    "孟买", "新德里", "加尔各答", "班加罗尔", "金奈",
    "伊斯坦布尔", "安卡拉", "迪拜", "阿布扎比", "多哈", "科威特",
    "开罗", "亚历山大", "卡萨布兰卡", "马拉喀什",
    "里约热内卢", "圣保罗", "布宜诺斯艾利斯", "利马", "圣地亚哥",
    # 国外地区/州/省
    "北海道", "本州", "四国", "九州", "冲绳",
    "加州", "纽约州", "佛州", "德州", "夏威夷",
    "巴厘岛", "爪哇岛", "苏门答腊",
    "西西里", "撒丁岛", "托斯卡纳",
    "巴伐利亚", "普罗旺斯", "安达卢西亚",
    "昆士兰", "新南威尔士", "维多利亚州",
    # 地区标识
    "欧洲", "北美", "南美", "非洲", "大洋洲", "中东", "东南亚", "南亚", "北欧", "西欧", "东欧",
    "出国", "国外", "海外", "境外", "签证", "护照", "免签", "落地签",
    # 特殊标识
    "游轮", "邮轮", "国际航班", "跨国", "环球", "世界", "全球",
)
